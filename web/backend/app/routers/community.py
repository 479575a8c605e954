"""Community router -- events, recommendations and chat.

Every submission is checked against the author's trust phase, then run
through the toxicity gate.  A toxic submission answers 400 with the flagged
terms; nothing is stored except the moderation flag.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from pulsemind.accounts.models import User
from pulsemind.errors import FeatureLockedError, InvalidSubmissionError, UserNotFoundError
from pulsemind.moderation.models import ContentType
from pulsemind.services import Services
from pulsemind.trust.access import can_read_community, is_visible_to_others, require_post_access
from web.backend.app.middleware.auth import get_current_user, get_optional_user, get_services
from web.backend.app.models.api import (
    ChatMessageRequest,
    EventCreateRequest,
    RecommendationCreateRequest,
)

router = APIRouter(prefix="/api", tags=["community"])

CHAT_HISTORY_LIMIT = 100

_REJECTION_MESSAGES = {
    ContentType.event: "Event contains inappropriate content. Please review our community guidelines.",
    ContentType.recommendation: "Post contains inappropriate content. Please review our community guidelines.",
    ContentType.message: "Message contains inappropriate content. Please review our community guidelines.",
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _hidden_authors(services: Services) -> set[str]:
    return {r.user_id for r in services.trust_store.list_records() if not is_visible_to_others(r)}


def _submit(
    services: Services, user: User, content_type: ContentType, fields: dict[str, Any]
) -> dict[str, Any]:
    record = services.trust_store.get(user.id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    try:
        require_post_access(record, exempt=user.is_operator)
        outcome = services.gate.submit(user.id, content_type, fields)
    except FeatureLockedError as exc:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"error": str(exc), "current_phase": exc.phase},
        )
    except InvalidSubmissionError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail={"error": str(exc)})
    except UserNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))

    if not outcome.accepted:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": _REJECTION_MESSAGES[content_type],
                "flagged_words": outcome.flagged_terms,
            },
        )
    return outcome.content


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@router.get("/events", summary="List events")
async def list_events(
    user: Optional[User] = Depends(get_optional_user),
    services: Services = Depends(get_services),
):
    return services.content.list_items(
        ContentType.event,
        hidden_authors=_hidden_authors(services),
        viewer_id=user.id if user else "",
    )


@router.post("/events", status_code=status.HTTP_201_CREATED, summary="Create an event")
async def create_event(
    body: EventCreateRequest,
    user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    return _submit(services, user, ContentType.event, body.model_dump())


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------


@router.get("/recommendations", summary="List recommendations")
async def list_recommendations(
    user: Optional[User] = Depends(get_optional_user),
    services: Services = Depends(get_services),
):
    return services.content.list_items(
        ContentType.recommendation,
        hidden_authors=_hidden_authors(services),
        viewer_id=user.id if user else "",
    )


@router.post(
    "/recommendations",
    status_code=status.HTTP_201_CREATED,
    summary="Create a recommendation",
)
async def create_recommendation(
    body: RecommendationCreateRequest,
    user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    return _submit(services, user, ContentType.recommendation, body.model_dump())


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------


@router.get("/chat/messages", summary="Latest chat messages, oldest first")
async def list_messages(
    user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    record = services.trust_store.get(user.id)
    if not user.is_operator and (record is None or not can_read_community(record)):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Reach the community-readonly phase to read the chat.",
        )
    latest = services.content.list_items(
        ContentType.message,
        hidden_authors=_hidden_authors(services),
        viewer_id=user.id,
        limit=CHAT_HISTORY_LIMIT,
    )
    return list(reversed(latest))


@router.post("/chat/messages", status_code=status.HTTP_201_CREATED, summary="Send a chat message")
async def send_message(
    body: ChatMessageRequest,
    user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    return _submit(services, user, ContentType.message, {"message": body.message})
