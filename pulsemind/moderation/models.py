"""Data models for the content moderation system."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

AUTOMATED_REASON = "Automated toxicity detection"
MANUAL_FLAG_SEVERITY = 0.5


class ContentType(str, Enum):
    message = "message"
    recommendation = "recommendation"
    event = "event"
    comment = "comment"


class FlagStatus(str, Enum):
    pending = "pending"
    reviewed = "reviewed"
    removed = "removed"
    false_positive = "false_positive"


@dataclass
class ModerationVerdict:
    """Classifier output for one piece of text."""

    is_toxic: bool
    score: float
    flagged_terms: list[str] = field(default_factory=list)


@dataclass
class FlaggedContentRecord:
    """A piece of content queued for moderator review."""

    content_type: ContentType
    content_id: str
    author_id: str
    reason: str
    toxicity_score: float = 0.0
    status: FlagStatus = FlagStatus.pending
    reporter_id: str = ""  # empty for automated flags
    moderator_action: str = ""
    moderator_id: str = ""
    id: str = ""
    flagged_at: str = ""
    reviewed_at: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            self.id = uuid.uuid4().hex[:16]
        if not self.flagged_at:
            self.flagged_at = datetime.now(timezone.utc).isoformat()
        if isinstance(self.content_type, str):
            self.content_type = ContentType(self.content_type)
        if isinstance(self.status, str):
            self.status = FlagStatus(self.status)


@dataclass
class SubmissionOutcome:
    """Result of pushing content through the toxicity gate.

    ``accepted`` submissions carry the stored content; rejected ones carry the
    flag record and the terms to show the author.
    """

    accepted: bool
    content: Optional[dict[str, Any]] = None
    verdict: Optional[ModerationVerdict] = None
    flag: Optional[FlaggedContentRecord] = None
    flagged_terms: list[str] = field(default_factory=list)
