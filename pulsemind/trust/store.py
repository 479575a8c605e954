"""File-based JSON storage for trust records.

Records live in ``~/.pulsemind/trust/records.json`` as a list of dicts.
Writes always replace the whole record; there are no partial updates.
"""

from __future__ import annotations

import json
import threading
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from pulsemind.errors import UserNotFoundError
from pulsemind.trust.models import Phase, UserTrustRecord

_DATE_FIELDS = ("last_session_date", "community_ready_date")


class TrustStore:
    """JSON-backed store of ``UserTrustRecord`` keyed by user id.

    Read-modify-write cycles go through :meth:`update`, which holds a
    per-store lock so concurrent events for one user in this process are
    applied one after another.  Separate processes sharing the file are
    last-write-wins.
    """

    def __init__(self, base_dir: Optional[str | Path] = None) -> None:
        self._base = Path(base_dir) if base_dir else Path.home() / ".pulsemind" / "trust"
        self._base.mkdir(parents=True, exist_ok=True)
        self._records_path = self._base / "records.json"
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _read_json(self) -> list[dict]:
        if not self._records_path.exists():
            return []
        try:
            data = json.loads(self._records_path.read_text())
            return data if isinstance(data, list) else []
        except (json.JSONDecodeError, OSError):
            return []

    def _write_json(self, data: list[dict]) -> None:
        self._records_path.write_text(json.dumps(data, indent=2, default=str))

    @staticmethod
    def _record_to_dict(r: UserTrustRecord) -> dict:
        d = asdict(r)
        d["current_phase"] = r.current_phase.value
        for name in _DATE_FIELDS:
            value = d[name]
            d[name] = value.isoformat() if value else None
        return d

    @staticmethod
    def _record_from_dict(d: dict) -> UserTrustRecord:
        dates = {
            name: datetime.fromisoformat(d[name]) if d.get(name) else None
            for name in _DATE_FIELDS
        }
        try:
            phase = Phase(d.get("current_phase", Phase.ai_only.value))
        except ValueError:
            phase = Phase.ai_only
        mood = d.get("mood_stability_score")
        return UserTrustRecord(
            user_id=d["user_id"],
            session_count=d.get("session_count", 0),
            last_session_date=dates["last_session_date"],
            engagement_days=d.get("engagement_days", 0),
            therapy_adoption_count=d.get("therapy_adoption_count", 0),
            mood_stability_score=float(mood) if mood is not None else None,
            reputation_score=float(d.get("reputation_score", 50.0)),
            toxicity_flags=d.get("toxicity_flags", 0),
            warning_count=d.get("warning_count", 0),
            is_shadow_banned=d.get("is_shadow_banned", False),
            readiness_score=float(d.get("readiness_score", 0.0)),
            current_phase=phase,
            community_ready_date=dates["community_ready_date"],
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get(self, user_id: str) -> Optional[UserTrustRecord]:
        for d in self._read_json():
            if d.get("user_id") == user_id:
                return self._record_from_dict(d)
        return None

    def list_records(self) -> list[UserTrustRecord]:
        return [self._record_from_dict(d) for d in self._read_json()]

    def save(self, record: UserTrustRecord) -> UserTrustRecord:
        """Insert or replace the full record for ``record.user_id``."""
        with self._lock:
            rows = self._read_json()
            new_row = self._record_to_dict(record)
            for i, d in enumerate(rows):
                if d.get("user_id") == record.user_id:
                    rows[i] = new_row
                    break
            else:
                rows.append(new_row)
            self._write_json(rows)
        return record

    def create(self, user_id: str) -> UserTrustRecord:
        """Create a zeroed record in phase ``ai-only`` (done once, at signup)."""
        return self.save(UserTrustRecord(user_id=user_id))

    def update(
        self, user_id: str, fn: Callable[[UserTrustRecord], UserTrustRecord]
    ) -> UserTrustRecord:
        """Load, transform with *fn* and save as one locked step.

        Raises ``UserNotFoundError`` (without writing) if no record exists.
        """
        with self._lock:
            record = self.get(user_id)
            if record is None:
                raise UserNotFoundError(user_id)
            updated = fn(record)
            return self.save(updated)
