"""Role checks.

Role hierarchy: admin > moderator > member
"""

from __future__ import annotations

from pulsemind.accounts.models import Role, User


def has_permission(user: User, required_role: Role) -> bool:
    """Return True if *user*'s role level is at least *required_role*'s."""
    user_role = user.role if isinstance(user.role, Role) else Role(user.role)
    return user_role.level >= required_role.level
