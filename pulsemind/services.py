"""Wiring of stores and services from :class:`~pulsemind.config.Settings`.

The web backend and the CLI both build one :class:`Services` per process.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pulsemind.accounts.models import Role, User
from pulsemind.accounts.store import UserStore, verify_password
from pulsemind.audit import AuditLogger
from pulsemind.config import Settings, get_settings
from pulsemind.content.store import ContentStore
from pulsemind.moderation.gate import ContentGate
from pulsemind.moderation.store import FlagStore
from pulsemind.trust.ladder import TrustLadder
from pulsemind.trust.store import TrustStore


@dataclass
class Services:
    settings: Settings
    users: UserStore
    trust_store: TrustStore
    flags: FlagStore
    content: ContentStore
    audit: AuditLogger
    ladder: TrustLadder
    gate: ContentGate

    def register(self, username: str, email: str, password: str, city: str = "") -> User:
        """Create a member account and its zeroed trust record.

        Public signup never grants a role above member, even for the
        operator email; see :meth:`ensure_operator`.
        """
        user = self.users.create_user(username, email, password, city=city, role=Role.member)
        self.trust_store.create(user.id)
        self.audit.log_event(
            actor=user.id,
            action="user_registered",
            resource_type="user",
            resource_id=user.id,
            details={"role": user.role.value},
        )
        return user

    def ensure_operator(self) -> Optional[User]:
        """Seed the operator account from the configured credential.

        Does nothing unless ``operator_password`` is set.  An account that
        already holds the operator email is promoted to admin only when it
        was registered with that password.
        """
        password = self.settings.operator_password
        if not password:
            return None
        email = self.settings.operator_email

        user = self.users.get_user_by_email(email)
        if user is None:
            user = self.users.create_user("operator", email, password, role=Role.admin)
            self.trust_store.create(user.id)
        elif not verify_password(password, user.password_hash):
            self.audit.log_event(
                actor="system",
                action="operator_seed_refused",
                resource_type="user",
                resource_id=user.id,
                success=False,
            )
            return None
        elif user.role is not Role.admin:
            user = self.users.update_user_role(user.id, Role.admin)
        else:
            return user

        self.audit.log_event(
            actor="system",
            action="operator_seeded",
            resource_type="user",
            resource_id=user.id,
        )
        return user


def build_services(settings: Optional[Settings] = None) -> Services:
    settings = settings or get_settings()
    audit = AuditLogger(settings.area("audit_logs"))
    trust_store = TrustStore(settings.area("trust"))
    flags = FlagStore(settings.area("moderation"))
    content = ContentStore(settings.area("content"))
    services = Services(
        settings=settings,
        users=UserStore(settings.area("auth")),
        trust_store=trust_store,
        flags=flags,
        content=content,
        audit=audit,
        ladder=TrustLadder(trust_store, audit),
        gate=ContentGate(
            trust_store,
            flags,
            content,
            audit=audit,
            max_message_length=settings.max_message_length,
        ),
    )
    services.ensure_operator()
    return services
