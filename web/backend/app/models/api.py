"""Pydantic models for API request/response serialization.

These models mirror the PulseMind dataclasses and provide proper JSON
serialization for the FastAPI endpoints.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Auth models
# ---------------------------------------------------------------------------


class UserResponse(BaseModel):
    """Public representation of a user."""

    id: str
    username: str
    email: str
    city: str = ""
    role: str = "member"
    created_at: str = ""
    last_login: str = ""


class SignupRequest(BaseModel):
    username: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)
    city: str = ""


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    """Response after successful signup or login."""

    token: str
    user: UserResponse


class AuthStatusResponse(BaseModel):
    """Response for the /me endpoint."""

    authenticated: bool
    user: Optional[UserResponse] = None


# ---------------------------------------------------------------------------
# Trust ladder models
# ---------------------------------------------------------------------------


class EngagementRequest(BaseModel):
    """An engagement event.

    ``data`` is accepted as an alias of ``payload`` for older clients.
    """

    action: str
    payload: Optional[dict[str, Any]] = None
    data: Optional[dict[str, Any]] = None


class EngagementResponse(BaseModel):
    readiness_score: float
    current_phase: str
    message: str = ""


class ReadinessResponse(BaseModel):
    """Stored trust counters plus the next milestone."""

    user_id: str
    readiness_score: float
    current_phase: str
    session_count: int = 0
    therapy_adoption_count: int = 0
    engagement_days: int = 0
    mood_stability_score: Optional[float] = None
    reputation_score: float = 50.0
    community_ready_date: Optional[str] = None
    next_milestone: str
    progress_to_next: float


class ReputationRequest(BaseModel):
    action: str  # "positive" | "negative"
    user_id: Optional[str] = None  # moderators only


class ReputationResponse(BaseModel):
    user_id: str
    reputation_score: float
    warning_count: int = 0


# ---------------------------------------------------------------------------
# Community content models
# ---------------------------------------------------------------------------


class EventCreateRequest(BaseModel):
    sport: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[str] = None
    duration: Optional[int] = None  # minutes
    max_participants: Optional[int] = None
    location: Optional[str] = None


class RecommendationCreateRequest(BaseModel):
    type: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None


class ChatMessageRequest(BaseModel):
    message: str = ""


# ---------------------------------------------------------------------------
# Moderation models
# ---------------------------------------------------------------------------


class FlagRequest(BaseModel):
    """Manual report of a piece of content."""

    content_type: str
    content_id: str
    reason: str = ""
    author_id: str = ""


class FlagResponse(BaseModel):
    """Mirrors pulsemind.moderation.models.FlaggedContentRecord."""

    id: str
    content_type: str
    content_id: str
    author_id: str = ""
    reporter_id: str = ""
    reason: str
    toxicity_score: float
    status: str
    flagged_at: str = ""
    reviewed_at: str = ""
