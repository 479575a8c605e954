"""Auth middleware -- FastAPI dependencies for the services and the current user.

Clients authenticate with ``Authorization: Bearer <session_token>``.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from pulsemind.accounts.models import Role, User
from pulsemind.accounts.permissions import has_permission
from pulsemind.services import Services, build_services

# Shared services instance
_services: Optional[Services] = None


def get_services() -> Services:
    """Return the process-wide Services instance."""
    global _services
    if _services is None:
        _services = build_services()
    return _services


async def get_current_user(
    authorization: Optional[str] = Header(None),
    services: Services = Depends(get_services),
) -> User:
    """FastAPI dependency that extracts and validates the current user.

    Raises ``401 Unauthorized`` if no valid session token is provided.
    """
    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() == "bearer" and token:
            user = services.users.validate_session(token)
            if user is not None:
                return user

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Please authenticate.",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_optional_user(
    authorization: Optional[str] = Header(None),
    services: Services = Depends(get_services),
) -> Optional[User]:
    """Same as ``get_current_user`` but returns ``None`` instead of raising 401."""
    try:
        return await get_current_user(authorization=authorization, services=services)
    except HTTPException:
        return None


def require_role(user: User, role: Role) -> None:
    """Raise ``HTTPException(403)`` unless *user* has at least *role*."""
    if not has_permission(user, role):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Requires role '{role.value}' or higher",
        )
