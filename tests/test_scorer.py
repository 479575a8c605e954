"""Tests for readiness scoring."""

import pytest

from pulsemind.trust.models import UserTrustRecord
from pulsemind.trust.scorer import readiness_score


def test_new_user_scores_reputation_only():
    assert readiness_score(UserTrustRecord(user_id="u1")) == pytest.approx(5.0)


def test_maxed_counters_score_100():
    record = UserTrustRecord(
        user_id="u1",
        session_count=5,
        therapy_adoption_count=3,
        engagement_days=7,
        mood_stability_score=100,
        reputation_score=100,
        toxicity_flags=0,
    )
    assert readiness_score(record) == pytest.approx(100.0)


def test_components_are_capped():
    record = UserTrustRecord(
        user_id="u1",
        session_count=50,
        therapy_adoption_count=30,
        engagement_days=70,
        mood_stability_score=100,
        reputation_score=100,
    )
    assert readiness_score(record) == pytest.approx(100.0)


def test_partial_components():
    record = UserTrustRecord(
        user_id="u1",
        session_count=2,            # 12
        therapy_adoption_count=1,   # 8.333
        engagement_days=2,          # 5.714
        mood_stability_score=60,    # 9
        reputation_score=50,        # 5
    )
    assert readiness_score(record) == pytest.approx(12 + 25 / 3 + 40 / 7 + 9 + 5)


def test_toxicity_penalty_and_floor():
    record = UserTrustRecord(user_id="u1", session_count=5, toxicity_flags=1)
    assert readiness_score(record) == pytest.approx(30 + 5 - 10)
    assert readiness_score(UserTrustRecord(user_id="u1", toxicity_flags=4)) == 0.0


def test_missing_mood_contributes_nothing():
    with_none = UserTrustRecord(user_id="u1", mood_stability_score=None)
    with_zero = UserTrustRecord(user_id="u1", mood_stability_score=0)
    assert readiness_score(with_none) == readiness_score(with_zero)


def test_scoring_is_idempotent():
    record = UserTrustRecord(user_id="u1", session_count=3, engagement_days=2, mood_stability_score=40)
    first = readiness_score(record)
    assert all(readiness_score(record) == first for _ in range(5))
