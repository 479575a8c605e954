"""Data models for the progressive trust ladder."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class Phase(str, Enum):
    """Trust phases, in ladder order: ai-only < micro-therapy < community-readonly < full-access."""

    ai_only = "ai-only"
    micro_therapy = "micro-therapy"
    community_readonly = "community-readonly"
    full_access = "full-access"

    @property
    def index(self) -> int:
        """Position on the ladder (0 = ai-only, 3 = full-access)."""
        return {
            Phase.ai_only: 0,
            Phase.micro_therapy: 1,
            Phase.community_readonly: 2,
            Phase.full_access: 3,
        }[self]


class EngagementAction(str, Enum):
    """Recognised engagement events."""

    session = "session"
    therapy_adoption = "therapy_adoption"
    assessment_complete = "assessment_complete"


@dataclass(frozen=True)
class UserTrustRecord:
    """Behavioural counters and derived trust state for one user.

    Instances are immutable; the engagement tracker, scorer and phase engine
    each return a new record.
    """

    user_id: str
    session_count: int = 0
    last_session_date: Optional[datetime] = None
    engagement_days: int = 0
    therapy_adoption_count: int = 0
    mood_stability_score: Optional[float] = None
    reputation_score: float = 50.0
    toxicity_flags: int = 0
    warning_count: int = 0
    is_shadow_banned: bool = False
    readiness_score: float = 0.0
    current_phase: Phase = Phase.ai_only
    community_ready_date: Optional[datetime] = None


@dataclass
class Milestone:
    """Next step on the ladder and how close the user is to it."""

    label: str
    progress_percent: float


@dataclass
class EngagementResult:
    """What the engagement endpoint reports back to the client."""

    readiness_score: float
    current_phase: Phase
    message: str = "Engagement tracked successfully"
