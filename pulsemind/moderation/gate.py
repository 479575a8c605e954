"""Toxicity gate for community submissions.

Every event, recommendation and chat message passes through
:meth:`ContentGate.submit` before it is stored.  A toxic verdict stores a
flag record instead of the content, penalises the author's trust record and
hands the flagged terms back to the caller.
"""

from __future__ import annotations

import uuid
from typing import Any, Optional

from pulsemind.audit import AuditLogger
from pulsemind.content.store import ContentStore
from pulsemind.errors import InvalidSubmissionError, UserNotFoundError
from pulsemind.moderation.classifier import KeywordToxicityClassifier, ToxicityClassifier
from pulsemind.moderation.models import (
    AUTOMATED_REASON,
    MANUAL_FLAG_SEVERITY,
    ContentType,
    FlaggedContentRecord,
    FlagStatus,
    ModerationVerdict,
    SubmissionOutcome,
)
from pulsemind.moderation.store import FlagStore
from pulsemind.trust.reputation import SHADOW_BAN_THRESHOLD, apply_toxicity_penalty
from pulsemind.trust.store import TrustStore

REQUIRED_FIELDS: dict[ContentType, tuple[str, ...]] = {
    ContentType.event: (
        "sport", "title", "description", "date", "duration", "max_participants", "location",
    ),
    ContentType.recommendation: ("type", "title", "description"),
    ContentType.message: ("message",),
}

# Fields run through the classifier, in the order their terms are reported.
TEXT_FIELDS: dict[ContentType, tuple[str, ...]] = {
    ContentType.event: ("title", "description"),
    ContentType.recommendation: ("title", "description"),
    ContentType.message: ("message",),
}

MAX_MESSAGE_LENGTH = 500


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def combine_verdicts(verdicts: list[ModerationVerdict]) -> ModerationVerdict:
    """Merge per-field verdicts: toxic if any field is, highest score, all terms in order."""
    terms: list[str] = []
    for v in verdicts:
        terms.extend(v.flagged_terms)
    return ModerationVerdict(
        is_toxic=any(v.is_toxic for v in verdicts),
        score=max((v.score for v in verdicts), default=0.0),
        flagged_terms=terms,
    )


class ContentGate:
    """Runs the classifier in front of the content store."""

    def __init__(
        self,
        trust_store: TrustStore,
        flag_store: FlagStore,
        content_store: ContentStore,
        audit: Optional[AuditLogger] = None,
        classifier: Optional[ToxicityClassifier] = None,
        max_message_length: int = MAX_MESSAGE_LENGTH,
    ) -> None:
        self._trust = trust_store
        self._flags = flag_store
        self._content = content_store
        self._audit = audit
        self._classifier = classifier or KeywordToxicityClassifier()
        self._max_message_length = max_message_length

    def _log(self, actor: str, action: str, resource_type: str, resource_id: str, **details) -> None:
        if self._audit is not None:
            self._audit.log_event(
                actor=actor,
                action=action,
                resource_type=resource_type,
                resource_id=resource_id,
                details=details,
                success=action not in ("toxicity_detected", "user_shadow_banned"),
            )

    # -- validation ----------------------------------------------------------

    def _clean_fields(self, content_type: ContentType, fields: dict[str, Any]) -> dict[str, Any]:
        missing = [name for name in REQUIRED_FIELDS[content_type] if _is_blank(fields.get(name))]
        if content_type is ContentType.message:
            if missing:
                raise InvalidSubmissionError("Message cannot be empty")
            if len(fields["message"]) > self._max_message_length:
                raise InvalidSubmissionError(
                    f"Message too long (max {self._max_message_length} characters)"
                )
            return {**fields, "message": fields["message"].strip()}
        if missing:
            raise InvalidSubmissionError(f"All fields are required (missing: {', '.join(missing)})")
        return dict(fields)

    # -- public API ----------------------------------------------------------

    def screen(self, content_type: ContentType, fields: dict[str, Any]) -> ModerationVerdict:
        """Classify every text field of a submission; no side effects."""
        return combine_verdicts(
            [self._classifier.evaluate(str(fields.get(name, ""))) for name in TEXT_FIELDS[content_type]]
        )

    def submit(
        self, author_id: str, content_type: ContentType | str, fields: dict[str, Any]
    ) -> SubmissionOutcome:
        """Gate and store a submission.

        Raises ``UserNotFoundError`` before touching anything when the author
        has no trust record, and ``InvalidSubmissionError`` for empty or
        oversized content.  A toxic submission is not an error: the outcome
        has ``accepted=False`` and the flagged terms.
        """
        content_type = ContentType(content_type)
        if content_type not in REQUIRED_FIELDS:
            raise InvalidSubmissionError(f"Unsupported content type: {content_type.value}")
        if self._trust.get(author_id) is None:
            raise UserNotFoundError(author_id)

        fields = self._clean_fields(content_type, fields)
        verdict = self.screen(content_type, fields)

        if not verdict.is_toxic:
            item = self._content.add(content_type, author_id, fields)
            self._log(author_id, "content_created", content_type.value, item["id"])
            return SubmissionOutcome(accepted=True, content=item, verdict=verdict)

        # Penalise first so a missing record never leaves an orphan flag.
        record = self._trust.update(author_id, apply_toxicity_penalty)

        # The content itself is discarded; the flag points at a placeholder id.
        flag = self._flags.add(
            FlaggedContentRecord(
                content_type=content_type,
                content_id=uuid.uuid4().hex[:16],
                author_id=author_id,
                reason=AUTOMATED_REASON,
                toxicity_score=verdict.score,
                status=FlagStatus.pending,
            )
        )

        self._log(
            author_id,
            "toxicity_detected",
            content_type.value,
            flag.id,
            score=verdict.score,
            flagged_terms=verdict.flagged_terms,
            toxicity_flags=record.toxicity_flags,
        )
        if record.is_shadow_banned and record.toxicity_flags == SHADOW_BAN_THRESHOLD:
            self._log(author_id, "user_shadow_banned", "user", author_id, toxicity_flags=record.toxicity_flags)

        return SubmissionOutcome(
            accepted=False,
            verdict=verdict,
            flag=flag,
            flagged_terms=list(verdict.flagged_terms),
        )

    def flag_manually(
        self,
        reporter_id: str,
        content_type: ContentType | str,
        content_id: str,
        reason: str,
        author_id: str = "",
    ) -> FlaggedContentRecord:
        """Queue content reported by a user.

        Manual reports skip the classifier, carry a fixed severity of 0.5 and
        leave every trust record alone.
        """
        flag = self._flags.add(
            FlaggedContentRecord(
                content_type=ContentType(content_type),
                content_id=content_id,
                author_id=author_id,
                reason=reason or "Reported by user",
                toxicity_score=MANUAL_FLAG_SEVERITY,
                status=FlagStatus.pending,
                reporter_id=reporter_id,
            )
        )
        self._log(reporter_id, "content_flagged", flag.content_type.value, flag.id, content_id=content_id)
        return flag

    def moderation_queue(self, limit: int = 50) -> list[FlaggedContentRecord]:
        return self._flags.pending(limit=limit)
