"""Trust-ladder router -- readiness, engagement tracking and reputation.

Prefix: ``/api/user``
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from pulsemind.accounts.models import Role, User
from pulsemind.accounts.permissions import has_permission
from pulsemind.errors import InvalidSubmissionError, UserNotFoundError
from pulsemind.services import Services
from web.backend.app.middleware.auth import get_current_user, get_services
from web.backend.app.models.api import (
    EngagementRequest,
    EngagementResponse,
    ReadinessResponse,
    ReputationRequest,
    ReputationResponse,
)

router = APIRouter(prefix="/api/user", tags=["trust"])


def _not_found(exc: UserNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.get("/readiness", response_model=ReadinessResponse, summary="Readiness and next milestone")
async def get_readiness(
    user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    try:
        report = services.ladder.readiness(user.id, exempt=user.is_operator)
    except UserNotFoundError as exc:
        raise _not_found(exc)

    r = report.record
    return ReadinessResponse(
        user_id=r.user_id,
        readiness_score=r.readiness_score,
        current_phase=r.current_phase.value,
        session_count=r.session_count,
        therapy_adoption_count=r.therapy_adoption_count,
        engagement_days=r.engagement_days,
        mood_stability_score=r.mood_stability_score,
        reputation_score=r.reputation_score,
        community_ready_date=r.community_ready_date.isoformat() if r.community_ready_date else None,
        next_milestone=report.milestone.label,
        progress_to_next=report.milestone.progress_percent,
    )


@router.post(
    "/track-engagement",
    response_model=EngagementResponse,
    summary="Record an engagement event",
)
async def track_engagement(
    body: EngagementRequest,
    user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    """Apply ``session``, ``therapy_adoption`` or ``assessment_complete``.

    Unknown actions are accepted and leave the counters unchanged.
    A non-numeric mood score answers 400.
    """
    payload = body.payload if body.payload is not None else body.data
    try:
        result = services.ladder.track_engagement(
            user.id, body.action, payload, exempt=user.is_operator
        )
    except UserNotFoundError as exc:
        raise _not_found(exc)
    except InvalidSubmissionError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail={"error": str(exc)})
    return EngagementResponse(
        readiness_score=result.readiness_score,
        current_phase=result.current_phase.value,
        message=result.message,
    )


@router.post("/reputation", response_model=ReputationResponse, summary="Peer reputation feedback")
async def update_reputation(
    body: ReputationRequest,
    user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    """Adjust the caller's reputation; moderators may name another user."""
    target = body.user_id or user.id
    if target != user.id and not has_permission(user, Role.moderator):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only moderators can adjust another user's reputation.",
        )
    try:
        record = services.ladder.adjust_reputation(target, body.action)
    except UserNotFoundError as exc:
        raise _not_found(exc)
    return ReputationResponse(
        user_id=record.user_id,
        reputation_score=record.reputation_score,
        warning_count=record.warning_count,
    )
