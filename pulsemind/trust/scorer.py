"""Readiness scoring.

The readiness score is a 0-100 composite of five capped components minus a
toxicity penalty:

==================  ===========================  ===
component           formula                      cap
==================  ===========================  ===
sessions            session_count / 5 * 30       30
therapy adoption    therapy_adoption_count/3*25  25
engagement days     engagement_days / 7 * 20     20
mood stability      mood_stability_score/100*15  15
reputation          reputation_score / 100 * 10  10
==================  ===========================  ===

Each toxicity flag subtracts 10 points; the result is clamped to [0, 100].
"""

from __future__ import annotations

from pulsemind.trust.models import UserTrustRecord

# (weight, divisor) per component; the weight is also the cap.
SESSION_WEIGHT = (30.0, 5)
THERAPY_WEIGHT = (25.0, 3)
DAYS_WEIGHT = (20.0, 7)
MOOD_WEIGHT = (15.0, 100)
REPUTATION_WEIGHT = (10.0, 100)

TOXICITY_PENALTY = 10.0


def _component(value: float, weight: tuple[float, int]) -> float:
    points, divisor = weight
    return min(value / divisor * points, points)


def readiness_score(record: UserTrustRecord) -> float:
    """Return the readiness score for *record*.

    Pure function: identical inputs always give identical outputs.  An absent
    mood stability score contributes nothing.
    """
    mood = record.mood_stability_score if record.mood_stability_score is not None else 0.0

    score = (
        _component(record.session_count, SESSION_WEIGHT)
        + _component(record.therapy_adoption_count, THERAPY_WEIGHT)
        + _component(record.engagement_days, DAYS_WEIGHT)
        + _component(mood, MOOD_WEIGHT)
        + _component(record.reputation_score, REPUTATION_WEIGHT)
    )
    score -= record.toxicity_flags * TOXICITY_PENALTY

    return max(0.0, min(score, 100.0))
