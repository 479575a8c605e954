"""Tests for phase transitions and milestones."""

from datetime import datetime, timedelta

import pytest

from pulsemind.trust.engagement import apply_engagement_event
from pulsemind.trust.milestones import next_milestone
from pulsemind.trust.models import Phase, UserTrustRecord
from pulsemind.trust.phases import advance_phase, recompute

NOW = datetime(2026, 3, 2, 12, 0)


def test_ai_only_needs_sessions_and_assessment():
    r = UserTrustRecord(user_id="u", session_count=2)
    assert advance_phase(r, NOW).current_phase is Phase.ai_only

    r = UserTrustRecord(user_id="u", session_count=2, mood_stability_score=0)
    assert advance_phase(r, NOW).current_phase is Phase.micro_therapy


def test_micro_therapy_to_readonly():
    r = UserTrustRecord(
        user_id="u",
        current_phase=Phase.micro_therapy,
        therapy_adoption_count=2,
        engagement_days=2,
    )
    assert advance_phase(r, NOW).current_phase is Phase.micro_therapy

    r = UserTrustRecord(
        user_id="u",
        current_phase=Phase.micro_therapy,
        therapy_adoption_count=2,
        engagement_days=3,
    )
    assert advance_phase(r, NOW).current_phase is Phase.community_readonly


def test_full_access_requires_clean_record():
    base = dict(user_id="u", current_phase=Phase.community_readonly, readiness_score=85)
    assert advance_phase(UserTrustRecord(**base, toxicity_flags=1), NOW).current_phase is Phase.community_readonly

    promoted = advance_phase(UserTrustRecord(**base), NOW)
    assert promoted.current_phase is Phase.full_access
    assert promoted.community_ready_date == NOW


def test_single_call_cascades_through_all_phases():
    r = UserTrustRecord(
        user_id="u",
        session_count=5,
        therapy_adoption_count=3,
        engagement_days=7,
        mood_stability_score=90,
        reputation_score=60,
    )
    result = recompute(r, now=NOW)
    assert result.readiness_score >= 70
    assert result.current_phase is Phase.full_access
    assert result.community_ready_date == NOW


def test_community_ready_date_is_set_once():
    first = UserTrustRecord(
        user_id="u",
        current_phase=Phase.full_access,
        readiness_score=100,
        community_ready_date=NOW,
    )
    later = NOW + timedelta(days=10)
    assert advance_phase(first, later).community_ready_date == NOW


def test_no_demotion():
    r = UserTrustRecord(user_id="u", current_phase=Phase.full_access, toxicity_flags=5)
    assert recompute(r, now=NOW).current_phase is Phase.full_access


def test_phase_never_regresses_over_event_sequence():
    events = [
        ("session", None), ("assessment_complete", {"moodScore": 70}), ("bogus", None),
        ("session", None), ("therapy_adoption", None), ("session", None),
        ("therapy_adoption", None), ("session", None), ("therapy_adoption", None),
        ("session", None), ("assessment_complete", {"moodScore": 10}),
    ]
    r = UserTrustRecord(user_id="u")
    now = NOW
    last_index = r.current_phase.index
    for action, payload in events:
        now += timedelta(days=1)
        r = recompute(apply_engagement_event(r, action, payload, now), now=now)
        assert r.current_phase.index >= last_index
        last_index = r.current_phase.index
    assert r.current_phase is Phase.full_access


@pytest.mark.parametrize(
    "record, label, progress",
    [
        (UserTrustRecord(user_id="u", session_count=1), "Complete assessment", 50.0),
        (UserTrustRecord(user_id="u", session_count=9), "Complete assessment", 100.0),
        (
            UserTrustRecord(user_id="u", current_phase=Phase.micro_therapy, therapy_adoption_count=1),
            "Try 2 recommended therapies",
            50.0,
        ),
        (
            UserTrustRecord(user_id="u", current_phase=Phase.community_readonly, readiness_score=35),
            "Reach 70% readiness score",
            50.0,
        ),
        (
            UserTrustRecord(user_id="u", current_phase=Phase.community_readonly, readiness_score=95),
            "Reach 70% readiness score",
            100.0,
        ),
        (UserTrustRecord(user_id="u", current_phase=Phase.full_access), "Maintain positive reputation", 100.0),
    ],
)
def test_next_milestone(record, label, progress):
    milestone = next_milestone(record)
    assert milestone.label == label
    assert milestone.progress_percent == pytest.approx(progress)
