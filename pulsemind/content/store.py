"""File-based JSON storage for community content.

One file per content type under ``~/.pulsemind/content/``:
``event.json``, ``recommendation.json`` and ``message.json``.
"""

from __future__ import annotations

import json
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Container, Optional

from pulsemind.moderation.models import ContentType


class ContentStore:
    """Stores submitted events, recommendations and chat messages as dicts."""

    def __init__(self, base_dir: Optional[str | Path] = None) -> None:
        self._base = Path(base_dir) if base_dir else Path.home() / ".pulsemind" / "content"
        self._base.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()

    def _path(self, content_type: ContentType) -> Path:
        return self._base / f"{ContentType(content_type).value}.json"

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

    def add(
        self, content_type: ContentType, author_id: str, fields: dict[str, Any]
    ) -> dict[str, Any]:
        """Persist one item and return it with ``id``, ``author_id`` and ``created_at``."""
        item = {
            "id": uuid.uuid4().hex[:16],
            "author_id": author_id,
            "created_at": datetime.now(timezone.utc).isoformat(),
            **fields,
        }
        path = self._path(content_type)
        with self._lock:
            rows = self._read_json(path)
            rows.append(item)
            self._write_json(path, rows)
        return item

    def list_items(
        self,
        content_type: ContentType,
        *,
        hidden_authors: Container[str] = (),
        viewer_id: str = "",
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        """Return items newest first.

        Items by *hidden_authors* are left out unless the viewer wrote them.
        """
        rows = [
            d
            for d in self._read_json(self._path(content_type))
            if d.get("author_id") not in hidden_authors or d.get("author_id") == viewer_id
        ]
        rows.sort(key=lambda d: d.get("created_at", ""), reverse=True)
        return rows[:limit] if limit is not None else rows
