"""Next-milestone view for the readiness meter."""

from __future__ import annotations

from pulsemind.trust.models import Milestone, Phase, UserTrustRecord
from pulsemind.trust.phases import FULL_ACCESS_READINESS


def _progress(value: float, target: float) -> float:
    return min(value / target * 100, 100.0)


def next_milestone(record: UserTrustRecord) -> Milestone:
    """Describe the next step for *record*'s current phase."""
    phase = record.current_phase
    if phase is Phase.ai_only:
        return Milestone("Complete assessment", _progress(record.session_count, 2))
    if phase is Phase.micro_therapy:
        return Milestone("Try 2 recommended therapies", _progress(record.therapy_adoption_count, 2))
    if phase is Phase.community_readonly:
        return Milestone(
            f"Reach {FULL_ACCESS_READINESS:.0f}% readiness score",
            _progress(record.readiness_score, FULL_ACCESS_READINESS),
        )
    return Milestone("Maintain positive reputation", 100.0)
