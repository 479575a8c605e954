"""Which community features a trust record unlocks."""

from __future__ import annotations

from pulsemind.errors import FeatureLockedError
from pulsemind.trust.models import Phase, UserTrustRecord


def can_read_community(record: UserTrustRecord) -> bool:
    return record.current_phase.index >= Phase.community_readonly.index


def can_post(record: UserTrustRecord) -> bool:
    return record.current_phase is Phase.full_access


def is_visible_to_others(record: UserTrustRecord) -> bool:
    """Shadow-banned authors still see their own posts; nobody else does."""
    return not record.is_shadow_banned


def require_post_access(record: UserTrustRecord, *, exempt: bool = False) -> None:
    """Raise ``FeatureLockedError`` unless *record* may post to the community."""
    if exempt or can_post(record):
        return
    raise FeatureLockedError(
        "Unlock full access to post in the community.", phase=record.current_phase.value
    )
