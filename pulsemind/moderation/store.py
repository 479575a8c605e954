"""File-based JSON storage for flagged content.

Stored as a list of dicts in ``~/.pulsemind/moderation/flags.json``.
"""

from __future__ import annotations

import json
import threading
from dataclasses import asdict
from pathlib import Path
from typing import Optional

from pulsemind.moderation.models import FlaggedContentRecord, FlagStatus


class FlagStore:
    """Append-mostly store of ``FlaggedContentRecord`` rows."""

    def __init__(self, base_dir: str | Path | None = None) -> None:
        self._base = Path(base_dir) if base_dir else Path.home() / ".pulsemind" / "moderation"
        self._base.mkdir(parents=True, exist_ok=True)
        self._flags_path = self._base / "flags.json"
        self._lock = threading.RLock()

    # -- persistence ---------------------------------------------------------

    def _load_all(self) -> list[dict]:
        if not self._flags_path.exists():
            return []
        try:
            data = json.loads(self._flags_path.read_text())
            return data if isinstance(data, list) else []
        except (json.JSONDecodeError, OSError):
            return []

    def _save_all(self, data: list[dict]) -> None:
        self._flags_path.write_text(json.dumps(data, indent=2, default=str))

    @staticmethod
    def _to_dict(flag: FlaggedContentRecord) -> dict:
        d = asdict(flag)
        d["content_type"] = flag.content_type.value
        d["status"] = flag.status.value
        return d

    # -- public API ----------------------------------------------------------

    def add(self, flag: FlaggedContentRecord) -> FlaggedContentRecord:
        with self._lock:
            rows = self._load_all()
            rows.append(self._to_dict(flag))
            self._save_all(rows)
        return flag

    def list_flags(
        self,
        *,
        status: Optional[FlagStatus] = None,
        author_id: Optional[str] = None,
    ) -> list[FlaggedContentRecord]:
        flags = [FlaggedContentRecord(**d) for d in self._load_all()]
        if status is not None:
            flags = [f for f in flags if f.status == status]
        if author_id:
            flags = [f for f in flags if f.author_id == author_id]
        return flags

    def pending(self, limit: int = 50) -> list[FlaggedContentRecord]:
        """Return pending flags, newest first."""
        flags = self.list_flags(status=FlagStatus.pending)
        flags.sort(key=lambda f: f.flagged_at, reverse=True)
        return flags[:limit]
