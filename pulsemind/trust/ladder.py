"""Trust-ladder service: load a record, run the pure transforms, save it.

This is what the engagement and readiness endpoints call.  Exempt callers
(operator accounts) never have their record touched and always see
``full-access`` with a score of 100.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from pulsemind.audit import AuditLogger
from pulsemind.errors import UserNotFoundError
from pulsemind.trust.engagement import apply_engagement_event
from pulsemind.trust.milestones import next_milestone
from pulsemind.trust.models import EngagementResult, Milestone, Phase, UserTrustRecord
from pulsemind.trust.phases import recompute
from pulsemind.trust.reputation import adjust_reputation
from pulsemind.trust.store import TrustStore

OPERATOR_SCORE = 100.0


@dataclass
class ReadinessReport:
    """Stored counters plus the derived next milestone."""

    record: UserTrustRecord
    milestone: Milestone

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self.record)
        d["current_phase"] = self.record.current_phase.value
        d["next_milestone"] = self.milestone.label
        d["progress_to_next"] = self.milestone.progress_percent
        return d


class TrustLadder:
    """Applies engagement events and answers readiness queries."""

    def __init__(self, store: TrustStore, audit: Optional[AuditLogger] = None) -> None:
        self._store = store
        self._audit = audit

    def _load(self, user_id: str) -> UserTrustRecord:
        record = self._store.get(user_id)
        if record is None:
            raise UserNotFoundError(user_id)
        return record

    def track_engagement(
        self,
        user_id: str,
        action: str,
        payload: Optional[Mapping[str, Any]] = None,
        *,
        exempt: bool = False,
        now: Optional[datetime] = None,
    ) -> EngagementResult:
        """Apply one engagement event, rescore, advance phases and persist.

        Unknown actions change no counters but still trigger the rescore and
        the phase check.
        """
        if exempt:
            self._load(user_id)
            return EngagementResult(
                readiness_score=OPERATOR_SCORE,
                current_phase=Phase.full_access,
                message="Operator account - full access maintained",
            )

        before: dict[str, Phase] = {}

        def transform(record: UserTrustRecord) -> UserTrustRecord:
            before["phase"] = record.current_phase
            updated = apply_engagement_event(record, action, payload, now)
            return recompute(updated, now=now)

        record = self._store.update(user_id, transform)

        if self._audit is not None:
            self._audit.log_event(
                actor=user_id,
                action="engagement_tracked",
                resource_type="trust",
                resource_id=user_id,
                details={"event": action, "readiness_score": record.readiness_score},
            )
            if record.current_phase is not before["phase"]:
                self._audit.log_event(
                    actor=user_id,
                    action="phase_advanced",
                    resource_type="trust",
                    resource_id=user_id,
                    details={
                        "from": before["phase"].value,
                        "to": record.current_phase.value,
                    },
                )

        return EngagementResult(
            readiness_score=record.readiness_score,
            current_phase=record.current_phase,
        )

    def readiness(self, user_id: str, *, exempt: bool = False) -> ReadinessReport:
        """Return the stored counters and the next milestone (read-only)."""
        record = self._load(user_id)
        if exempt:
            record = UserTrustRecord(
                user_id=record.user_id,
                readiness_score=OPERATOR_SCORE,
                current_phase=Phase.full_access,
                reputation_score=record.reputation_score,
                community_ready_date=record.community_ready_date,
            )
        return ReadinessReport(record=record, milestone=next_milestone(record))

    def adjust_reputation(self, user_id: str, direction: str) -> UserTrustRecord:
        """Apply ``positive`` / ``negative`` peer feedback to *user_id*."""
        before = self._load(user_id).reputation_score
        record = self._store.update(user_id, lambda r: adjust_reputation(r, direction))
        if self._audit is not None and record.reputation_score != before:
            self._audit.log_event(
                actor=user_id,
                action="reputation_changed",
                resource_type="trust",
                resource_id=user_id,
                details={"direction": direction, "reputation_score": record.reputation_score},
            )
        return record
