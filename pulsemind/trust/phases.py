"""Phase transition engine.

Transitions are an ordered list checked top to bottom against the phase
produced by the previous step, so a single evaluation can move a user
through several phases when the thresholds are already met.  There is no
demotion rule.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Optional

from pulsemind.trust.models import Phase, UserTrustRecord
from pulsemind.trust.scorer import readiness_score

FULL_ACCESS_READINESS = 70.0


@dataclass(frozen=True)
class PhaseTransition:
    """Move from *source* to *target* when *predicate* holds."""

    source: Phase
    target: Phase
    predicate: Callable[[UserTrustRecord], bool]
    description: str = ""


def _assessed_with_sessions(r: UserTrustRecord) -> bool:
    return r.session_count >= 2 and r.mood_stability_score is not None


def _adopted_therapies(r: UserTrustRecord) -> bool:
    return r.therapy_adoption_count >= 2 and r.engagement_days >= 3


def _community_ready(r: UserTrustRecord) -> bool:
    return r.readiness_score >= FULL_ACCESS_READINESS and r.toxicity_flags == 0


TRANSITIONS: list[PhaseTransition] = [
    PhaseTransition(
        Phase.ai_only,
        Phase.micro_therapy,
        _assessed_with_sessions,
        "2+ sessions and a completed mood assessment",
    ),
    PhaseTransition(
        Phase.micro_therapy,
        Phase.community_readonly,
        _adopted_therapies,
        "2+ therapies adopted over 3+ engagement days",
    ),
    PhaseTransition(
        Phase.community_readonly,
        Phase.full_access,
        _community_ready,
        "readiness >= 70 with no toxicity flags",
    ),
]


def advance_phase(
    record: UserTrustRecord,
    now: Optional[datetime] = None,
    transitions: Optional[list[PhaseTransition]] = None,
) -> UserTrustRecord:
    """Apply every matching transition in order and return the new record."""
    now = now or datetime.now().astimezone()
    current = record
    for transition in transitions if transitions is not None else TRANSITIONS:
        if current.current_phase is not transition.source:
            continue
        if not transition.predicate(current):
            continue
        current = replace(current, current_phase=transition.target)
        if transition.target is Phase.full_access and current.community_ready_date is None:
            current = replace(current, community_ready_date=now)
    return current


def recompute(record: UserTrustRecord, now: Optional[datetime] = None) -> UserTrustRecord:
    """Refresh the readiness score from the counters, then run the phase engine."""
    scored = replace(record, readiness_score=readiness_score(record))
    return advance_phase(scored, now=now)
