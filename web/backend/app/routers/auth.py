"""Auth router -- signup, login, logout and the current user."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from pulsemind.accounts.models import User
from pulsemind.services import Services
from web.backend.app.middleware.auth import get_current_user, get_services
from web.backend.app.models.api import (
    AuthStatusResponse,
    LoginRequest,
    LoginResponse,
    SignupRequest,
    UserResponse,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _user_response(u: User) -> UserResponse:
    """Convert a domain User to a Pydantic UserResponse."""
    return UserResponse(
        id=u.id,
        username=u.username,
        email=u.email,
        city=u.city,
        role=u.role.value,
        created_at=u.created_at,
        last_login=u.last_login,
    )


@router.post(
    "/signup",
    response_model=LoginResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
)
async def signup(body: SignupRequest, services: Services = Depends(get_services)):
    """Register a new account, start it on the trust ladder and open a session."""
    try:
        user = services.register(body.username, body.email, body.password, city=body.city)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    session = services.users.create_session(user.id, services.settings.session_hours)
    return LoginResponse(token=session.token, user=_user_response(user))


@router.post("/login", response_model=LoginResponse, summary="Login with email and password")
async def login(body: LoginRequest, services: Services = Depends(get_services)):
    user = services.users.authenticate(body.email, body.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    session = services.users.create_session(user.id, services.settings.session_hours)
    return LoginResponse(token=session.token, user=_user_response(user))


@router.post("/logout", summary="Logout / invalidate sessions")
async def logout(
    user: User = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    """Invalidate every session of the current user."""
    services.users.delete_sessions_for_user(user.id)
    return {"ok": True}


@router.get("/me", response_model=AuthStatusResponse, summary="Get current user info")
async def me(user: User = Depends(get_current_user)):
    return AuthStatusResponse(authenticated=True, user=_user_response(user))
