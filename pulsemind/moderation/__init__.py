"""Toxicity classification and the content gate."""

from pulsemind.moderation.classifier import KeywordToxicityClassifier, ToxicityClassifier, evaluate
from pulsemind.moderation.models import FlaggedContentRecord, ModerationVerdict

__all__ = [
    "FlaggedContentRecord",
    "KeywordToxicityClassifier",
    "ModerationVerdict",
    "ToxicityClassifier",
    "evaluate",
]
