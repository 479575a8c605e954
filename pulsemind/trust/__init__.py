"""Progressive trust ladder: readiness scoring, phases and engagement."""

from pulsemind.trust.engagement import apply_engagement_event
from pulsemind.trust.milestones import next_milestone
from pulsemind.trust.models import EngagementAction, Milestone, Phase, UserTrustRecord
from pulsemind.trust.phases import TRANSITIONS, PhaseTransition, advance_phase, recompute
from pulsemind.trust.scorer import readiness_score

__all__ = [
    "EngagementAction",
    "Milestone",
    "Phase",
    "PhaseTransition",
    "TRANSITIONS",
    "UserTrustRecord",
    "advance_phase",
    "apply_engagement_event",
    "next_milestone",
    "readiness_score",
    "recompute",
]
