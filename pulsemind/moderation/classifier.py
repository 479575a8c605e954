"""Keyword-based toxicity classifier.

Three severity tiers are scanned in order (high, medium, low).  Every term is
matched as a case-insensitive substring of the whole text, so overlapping
phrases count separately: "die" and "death" in one message add 0.4 + 0.4.
The score saturates at 1.0 and anything at or above 0.5 is toxic.

The classifier sits behind :class:`ToxicityClassifier` so a model-backed
implementation can replace it without changing callers.
"""

from __future__ import annotations

from pulsemind.moderation.models import ModerationVerdict

# ---------------------------------------------------------------------------
# Term tiers
# ---------------------------------------------------------------------------

HIGH_SEVERITY: list[str] = [
    "kill yourself", "kys", "suicide", "self harm", "self-harm",
    "kill you", "murder", "rape", "molest", "pedophile",
]

MEDIUM_SEVERITY: list[str] = [
    "hate you", "hate them", "stupid", "idiot", "moron", "retard",
    "loser", "worthless", "pathetic", "disgusting", "trash", "garbage",
    "die", "death", "threat", "violence", "harm", "attack", "beat up",
    "bully", "abuse", "racist", "sexist", "slur",
]

LOW_SEVERITY: list[str] = [
    "dumb", "ugly", "fat", "annoying", "shut up", "go away",
    "nobody likes you", "hate this", "sucks", "terrible",
]

# Scan order matters: flagged terms are reported high tier first.
TIERS: list[tuple[list[str], float]] = [
    (HIGH_SEVERITY, 0.8),
    (MEDIUM_SEVERITY, 0.4),
    (LOW_SEVERITY, 0.2),
]

TOXIC_THRESHOLD = 0.5


class ToxicityClassifier:
    """Interface for anything that can turn text into a verdict."""

    def evaluate(self, text: str) -> ModerationVerdict:
        raise NotImplementedError


class KeywordToxicityClassifier(ToxicityClassifier):
    """Weighted substring matcher over fixed severity tiers."""

    def __init__(
        self,
        tiers: list[tuple[list[str], float]] | None = None,
        threshold: float = TOXIC_THRESHOLD,
    ) -> None:
        self._tiers = tiers if tiers is not None else TIERS
        self._threshold = threshold

    def evaluate(self, text: str) -> ModerationVerdict:
        lowered = (text or "").lower()
        total = 0.0
        flagged: list[str] = []

        for terms, weight in self._tiers:
            for term in terms:
                if term in lowered:
                    total += weight
                    flagged.append(term)

        score = min(total, 1.0)
        return ModerationVerdict(
            is_toxic=score >= self._threshold,
            score=score,
            flagged_terms=flagged,
        )


_default = KeywordToxicityClassifier()


def evaluate(text: str) -> ModerationVerdict:
    """Classify *text* with the default keyword classifier."""
    return _default.evaluate(text)
