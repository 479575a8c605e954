"""File-based JSON storage for accounts and sessions.

Backed by simple JSON files under ``~/.pulsemind/auth/``.
"""

from __future__ import annotations

import json
import secrets
import uuid
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

from passlib.context import CryptContext

from pulsemind.accounts.models import Role, Session, User

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Return a salted bcrypt hash of *password*."""
    return pwd_context.hash(password)


def verify_password(password: str, stored: str) -> bool:
    if not stored:
        return False
    try:
        return pwd_context.verify(password, stored)
    except ValueError:
        # Unrecognised or malformed hash
        return False


class UserStore:
    """File-based storage for users and sessions.

    Storage path: ``~/.pulsemind/auth/`` with:
    - ``users.json`` -- list of user dicts
    - ``sessions.json`` -- list of session dicts
    """

    def __init__(self, base_dir: Optional[str | Path] = None) -> None:
        if base_dir is None:
            self._base = Path.home() / ".pulsemind" / "auth"
        else:
            self._base = Path(base_dir)
        self._base.mkdir(parents=True, exist_ok=True)
        self._users_path = self._base / "users.json"
        self._sessions_path = self._base / "sessions.json"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _read_json(self, path: Path) -> list[dict]:
        if not path.exists():
            return []
        try:
            data = json.loads(path.read_text())
            return data if isinstance(data, list) else []
        except (json.JSONDecodeError, OSError):
            return []

    def _write_json(self, path: Path, data: list[dict]) -> None:
        path.write_text(json.dumps(data, indent=2, default=str))

    @staticmethod
    def _user_from_dict(d: dict) -> User:
        try:
            role = Role(d.get("role", "member"))
        except ValueError:
            role = Role.member
        return User(
            id=d["id"],
            username=d["username"],
            email=d["email"],
            city=d.get("city", ""),
            password_hash=d.get("password_hash", ""),
            role=role,
            created_at=d.get("created_at", ""),
            last_login=d.get("last_login", ""),
        )

    @staticmethod
    def _user_to_dict(u: User) -> dict:
        return {
            "id": u.id,
            "username": u.username,
            "email": u.email,
            "city": u.city,
            "password_hash": u.password_hash,
            "role": u.role.value if isinstance(u.role, Role) else u.role,
            "created_at": u.created_at,
            "last_login": u.last_login,
        }

    # ------------------------------------------------------------------
    # User CRUD
    # ------------------------------------------------------------------

    def create_user(
        self,
        username: str,
        email: str,
        password: str,
        city: str = "",
        role: Role = Role.member,
    ) -> User:
        """Persist a new account. Raises ``ValueError`` if the email is taken."""
        if self.get_user_by_email(email) is not None:
            raise ValueError(f"Email '{email}' is already registered")
        user = User(
            id=uuid.uuid4().hex,
            username=username,
            email=email,
            city=city,
            password_hash=hash_password(password),
            role=role,
        )
        users = self._read_json(self._users_path)
        users.append(self._user_to_dict(user))
        self._write_json(self._users_path, users)
        return user

    def get_user(self, user_id: str) -> Optional[User]:
        for d in self._read_json(self._users_path):
            if d["id"] == user_id:
                return self._user_from_dict(d)
        return None

    def get_user_by_email(self, email: str) -> Optional[User]:
        for d in self._read_json(self._users_path):
            if d.get("email", "").lower() == email.lower():
                return self._user_from_dict(d)
        return None

    def authenticate(self, email: str, password: str) -> Optional[User]:
        """Return the user for valid credentials (and stamp ``last_login``), else None."""
        user = self.get_user_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            return None
        users = self._read_json(self._users_path)
        now = datetime.utcnow().isoformat()
        for d in users:
            if d["id"] == user.id:
                d["last_login"] = now
        self._write_json(self._users_path, users)
        user.last_login = now
        return user

    def update_user_role(self, user_id: str, role: Role) -> Optional[User]:
        """Update a user's role. Returns the updated user or None."""
        users = self._read_json(self._users_path)
        for d in users:
            if d["id"] == user_id:
                d["role"] = role.value if isinstance(role, Role) else role
                self._write_json(self._users_path, users)
                return self._user_from_dict(d)
        return None

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def create_session(self, user_id: str, expires_in_hours: int = 24) -> Session:
        """Create a new session for a user."""
        now = datetime.utcnow()
        session = Session(
            id=str(uuid.uuid4()),
            user_id=user_id,
            token=secrets.token_urlsafe(48),
            created_at=now.isoformat(),
            expires_at=(now + timedelta(hours=expires_in_hours)).isoformat(),
        )

        sessions = self._read_json(self._sessions_path)
        sessions.append({
            "id": session.id,
            "user_id": session.user_id,
            "token": session.token,
            "created_at": session.created_at,
            "expires_at": session.expires_at,
        })
        self._write_json(self._sessions_path, sessions)
        return session

    def validate_session(self, token: str) -> Optional[User]:
        """Validate a session token and return the associated user, or None."""
        now = datetime.utcnow().isoformat()
        for d in self._read_json(self._sessions_path):
            if d["token"] == token:
                if d.get("expires_at") and d["expires_at"] < now:
                    self.delete_session(token)
                    return None
                return self.get_user(d["user_id"])
        return None

    def delete_session(self, token: str) -> bool:
        sessions = self._read_json(self._sessions_path)
        original_len = len(sessions)
        sessions = [d for d in sessions if d["token"] != token]
        if len(sessions) < original_len:
            self._write_json(self._sessions_path, sessions)
            return True
        return False

    def delete_sessions_for_user(self, user_id: str) -> int:
        sessions = self._read_json(self._sessions_path)
        kept = [d for d in sessions if d["user_id"] != user_id]
        self._write_json(self._sessions_path, kept)
        return len(sessions) - len(kept)
