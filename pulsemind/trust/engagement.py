"""Engagement tracking: counter updates for a single engagement event."""

from __future__ import annotations

import math
from dataclasses import replace
from datetime import datetime
from typing import Any, Mapping, Optional

from pulsemind.errors import InvalidSubmissionError
from pulsemind.trust.models import EngagementAction, UserTrustRecord

MOOD_MIN = 0.0
MOOD_MAX = 100.0


def _mood_from_payload(payload: Optional[Mapping[str, Any]]) -> Optional[float]:
    """Return the payload's mood score clamped to [0, 100], or None if absent.

    Raises ``InvalidSubmissionError`` for a value that is not a number.
    """
    if not payload:
        return None
    for key in ("moodScore", "mood_score"):
        value = payload.get(key)
        if value is None:
            continue
        if isinstance(value, bool):
            raise InvalidSubmissionError(f"{key} must be a number")
        try:
            mood = float(value)
        except (TypeError, ValueError):
            raise InvalidSubmissionError(f"{key} must be a number") from None
        if math.isnan(mood):
            raise InvalidSubmissionError(f"{key} must be a number")
        return min(MOOD_MAX, max(MOOD_MIN, mood))
    return None


def apply_engagement_event(
    record: UserTrustRecord,
    action: str,
    payload: Optional[Mapping[str, Any]] = None,
    now: Optional[datetime] = None,
    *,
    exempt: bool = False,
) -> UserTrustRecord:
    """Return a copy of *record* with the counters for *action* updated.

    ``session`` bumps the session count and, at most once per calendar day,
    the engagement-day count.  ``therapy_adoption`` bumps the adoption count
    without limit.  ``assessment_complete`` overwrites the mood stability
    score, clamped to [0, 100], when the payload carries one.  Any other
    action leaves the record unchanged.

    Exempt (operator) records are returned untouched.
    """
    if exempt:
        return record

    now = now or datetime.now().astimezone()

    try:
        kind = EngagementAction(action)
    except ValueError:
        return record

    if kind is EngagementAction.session:
        last = record.last_session_date
        new_day = last is None or last.date() != now.date()
        return replace(
            record,
            session_count=record.session_count + 1,
            engagement_days=record.engagement_days + (1 if new_day else 0),
            last_session_date=now,
        )

    if kind is EngagementAction.therapy_adoption:
        return replace(record, therapy_adoption_count=record.therapy_adoption_count + 1)

    mood = _mood_from_payload(payload)
    if mood is None:
        return record
    return replace(record, mood_stability_score=mood)
