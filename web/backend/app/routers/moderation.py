"""Moderation router -- manual reports and the review queue.

Prefix: ``/api/moderation``
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from pulsemind.accounts.models import Role, User
from pulsemind.moderation.models import ContentType, FlaggedContentRecord
from pulsemind.services import Services
from web.backend.app.middleware.auth import get_current_user, get_services, require_role
from web.backend.app.models.api import FlagRequest, FlagResponse

router = APIRouter(prefix="/api/moderation", tags=["moderation"])


def _flag_response(f: FlaggedContentRecord) -> FlagResponse:
    return FlagResponse(
        id=f.id,
        content_type=f.content_type.value,
        content_id=f.content_id,
        author_id=f.author_id,
        reporter_id=f.reporter_id,
        reason=f.reason,
        toxicity_score=f.toxicity_score,
        status=f.status.value,
        flagged_at=f.flagged_at,
        reviewed_at=f.reviewed_at,
    )


@router.post(
    "/flag",
    response_model=FlagResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Report content for review",
)
async def flag_content(
    body: FlagRequest,
    user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    try:
        content_type = ContentType(body.content_type)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid content type: {body.content_type}. "
            f"Valid types: {[c.value for c in ContentType]}",
        )
    flag = services.gate.flag_manually(
        user.id, content_type, body.content_id, body.reason, author_id=body.author_id
    )
    return _flag_response(flag)


@router.get(
    "/queue",
    response_model=list[FlagResponse],
    summary="Pending flags, newest first (moderators only)",
)
async def moderation_queue(
    limit: int = Query(50, ge=1, le=500),
    user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    require_role(user, Role.moderator)
    return [_flag_response(f) for f in services.gate.moderation_queue(limit=limit)]
