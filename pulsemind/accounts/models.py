"""Account domain models for users and sessions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    """Role hierarchy: admin > moderator > member."""

    admin = "admin"
    moderator = "moderator"
    member = "member"

    @property
    def level(self) -> int:
        """Return numeric level for comparison (higher = more privileges)."""
        return {
            Role.admin: 30,
            Role.moderator: 20,
            Role.member: 10,
        }[self]


@dataclass
class User:
    """A registered PulseMind account."""

    id: str
    username: str
    email: str
    city: str = ""
    password_hash: str = ""
    role: Role = Role.member
    created_at: str = ""
    last_login: str = ""

    def __post_init__(self) -> None:
        if not self.created_at:
            self.created_at = datetime.utcnow().isoformat()
        if isinstance(self.role, str):
            self.role = Role(self.role)

    @property
    def is_operator(self) -> bool:
        """Operator accounts sit outside the trust ladder."""
        return self.role is Role.admin


@dataclass
class Session:
    """Represents an active user session."""

    id: str
    user_id: str
    token: str
    created_at: str = ""
    expires_at: str = ""

    def __post_init__(self) -> None:
        if not self.created_at:
            self.created_at = datetime.utcnow().isoformat()
