"""Reputation and toxicity-penalty transforms on trust records."""

from __future__ import annotations

from dataclasses import replace

from pulsemind.trust.models import UserTrustRecord

SHADOW_BAN_THRESHOLD = 3
TOXICITY_REPUTATION_PENALTY = 10.0
POSITIVE_STEP = 5.0
NEGATIVE_STEP = 10.0


def apply_toxicity_penalty(record: UserTrustRecord) -> UserTrustRecord:
    """Count one automated toxicity detection against *record*.

    Costs 10 reputation (floored at 0).  The third flag shadow-bans the user
    and nothing here ever lifts the ban.
    """
    flags = record.toxicity_flags + 1
    return replace(
        record,
        toxicity_flags=flags,
        reputation_score=max(0.0, record.reputation_score - TOXICITY_REPUTATION_PENALTY),
        is_shadow_banned=record.is_shadow_banned or flags >= SHADOW_BAN_THRESHOLD,
    )


def adjust_reputation(record: UserTrustRecord, direction: str) -> UserTrustRecord:
    """Apply peer feedback: ``positive`` +5, ``negative`` -10 and a warning."""
    if direction == "positive":
        return replace(record, reputation_score=min(100.0, record.reputation_score + POSITIVE_STEP))
    if direction == "negative":
        return replace(
            record,
            reputation_score=max(0.0, record.reputation_score - NEGATIVE_STEP),
            warning_count=record.warning_count + 1,
        )
    return record
