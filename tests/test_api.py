"""Tests for the FastAPI backend."""

import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from pulsemind.config import Settings
from pulsemind.services import build_services
from pulsemind.trust.models import Phase, UserTrustRecord
from web.backend.app.main import app
from web.backend.app.middleware.auth import get_services


@pytest.fixture
def client():
    with tempfile.TemporaryDirectory() as tmpdir:
        services = build_services(
            Settings(
                home_dir=Path(tmpdir),
                operator_email="ops@pulsemind.test",
                operator_password="ops-pass-123",
            )
        )
        app.dependency_overrides[get_services] = lambda: services
        try:
            yield TestClient(app), services
        finally:
            app.dependency_overrides.clear()


def _signup(client, email="sam@example.com", username="sam"):
    resp = client.post(
        "/api/auth/signup",
        json={"username": username, "email": email, "password": "secret123", "city": "Pune"},
    )
    assert resp.status_code == 201, resp.text
    body = resp.json()
    return body["user"]["id"], {"Authorization": f"Bearer {body['token']}"}


def _operator_login(client):
    resp = client.post(
        "/api/auth/login", json={"email": "ops@pulsemind.test", "password": "ops-pass-123"}
    )
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["user"]["role"] == "admin"
    return body["user"]["id"], {"Authorization": f"Bearer {body['token']}"}


def _promote(services, user_id):
    services.trust_store.save(
        UserTrustRecord(user_id=user_id, current_phase=Phase.full_access, readiness_score=90)
    )


def test_health(client):
    c, _ = client
    assert c.get("/health").json() == {"status": "healthy"}


def test_signup_login_and_me(client):
    c, _ = client
    _signup(c)
    assert c.post("/api/auth/signup", json={
        "username": "x", "email": "sam@example.com", "password": "secret123",
    }).status_code == 400

    assert c.post("/api/auth/login", json={"email": "sam@example.com", "password": "nope"}).status_code == 401
    resp = c.post("/api/auth/login", json={"email": "sam@example.com", "password": "secret123"})
    assert resp.status_code == 200
    headers = {"Authorization": f"Bearer {resp.json()['token']}"}
    assert c.get("/api/auth/me", headers=headers).json()["user"]["city"] == "Pune"


def test_requires_authentication(client):
    c, _ = client
    assert c.get("/api/user/readiness").status_code == 401
    assert c.post("/api/user/track-engagement", json={"action": "session"}).status_code == 401


def test_readiness_for_new_user(client):
    c, _ = client
    _, headers = _signup(c)
    body = c.get("/api/user/readiness", headers=headers).json()
    assert body["current_phase"] == "ai-only"
    assert body["next_milestone"] == "Complete assessment"
    assert body["progress_to_next"] == 0
    assert body["mood_stability_score"] is None


def test_track_engagement_endpoint(client):
    c, _ = client
    _, headers = _signup(c)
    c.post("/api/user/track-engagement", json={"action": "session"}, headers=headers)
    c.post("/api/user/track-engagement", json={"action": "session"}, headers=headers)
    resp = c.post(
        "/api/user/track-engagement",
        json={"action": "assessment_complete", "data": {"moodScore": 75}},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json()["current_phase"] == "micro-therapy"

    resp = c.post("/api/user/track-engagement", json={"action": "dance"}, headers=headers)
    assert resp.status_code == 200


def test_operator_is_exempt(client):
    c, services = client
    user_id, headers = _operator_login(c)
    resp = c.post("/api/user/track-engagement", json={"action": "session"}, headers=headers)
    assert resp.json()["readiness_score"] == 100
    assert resp.json()["current_phase"] == "full-access"
    assert services.trust_store.get(user_id).session_count == 0

    # Operators can post without climbing the ladder
    resp = c.post("/api/chat/messages", json={"message": "Welcome all"}, headers=headers)
    assert resp.status_code == 201


def test_posting_locked_below_full_access(client):
    c, services = client
    _, headers = _signup(c)
    resp = c.post("/api/chat/messages", json={"message": "hi"}, headers=headers)
    assert resp.status_code == 403
    assert resp.json()["detail"]["current_phase"] == "ai-only"


def test_toxic_chat_message_rejected(client):
    c, services = client
    user_id, headers = _signup(c)
    _promote(services, user_id)

    resp = c.post("/api/chat/messages", json={"message": "shut up, you idiot"}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["detail"]["flagged_words"] == ["idiot", "shut up"]

    record = services.trust_store.get(user_id)
    assert record.toxicity_flags == 1
    assert record.reputation_score == 40
    assert c.get("/api/chat/messages", headers=headers).json() == []


def test_clean_event_created_and_listed(client):
    c, services = client
    user_id, headers = _signup(c)
    _promote(services, user_id)
    event = {
        "sport": "running",
        "title": "Sunrise 5k",
        "description": "Easy pace, all welcome",
        "date": "2026-06-01T06:00:00",
        "duration": 45,
        "max_participants": 12,
        "location": "Riverside",
    }
    resp = c.post("/api/events", json=event, headers=headers)
    assert resp.status_code == 201
    assert resp.json()["author_id"] == user_id

    listed = c.get("/api/events").json()
    assert [e["title"] for e in listed] == ["Sunrise 5k"]

    resp = c.post("/api/events", json={"title": "x"}, headers=headers)
    assert resp.status_code == 400


def test_shadow_banned_posts_hidden_from_others(client):
    c, services = client
    user_id, headers = _signup(c)
    _, other_headers = _signup(c, email="kim@example.com", username="kim")
    services.trust_store.save(
        UserTrustRecord(user_id=user_id, current_phase=Phase.full_access, is_shadow_banned=True, toxicity_flags=3)
    )
    resp = c.post(
        "/api/recommendations",
        json={"type": "book", "title": "Quiet", "description": "A calm read"},
        headers=headers,
    )
    assert resp.status_code == 201
    assert c.get("/api/recommendations", headers=headers).json() != []
    assert c.get("/api/recommendations", headers=other_headers).json() == []


def test_reputation_endpoint(client):
    c, _ = client
    _, headers = _signup(c)
    resp = c.post("/api/user/reputation", json={"action": "negative"}, headers=headers)
    assert resp.json() == {"user_id": resp.json()["user_id"], "reputation_score": 40.0, "warning_count": 1}


def test_manual_flag_and_queue(client):
    c, services = client
    _, headers = _signup(c)
    resp = c.post(
        "/api/moderation/flag",
        json={"content_type": "message", "content_id": "m-1", "reason": "Harassment"},
        headers=headers,
    )
    assert resp.status_code == 201
    assert resp.json()["toxicity_score"] == 0.5

    assert c.post(
        "/api/moderation/flag",
        json={"content_type": "poem", "content_id": "p-1"},
        headers=headers,
    ).status_code == 400

    # Members cannot read the queue; operators can
    assert c.get("/api/moderation/queue", headers=headers).status_code == 403
    _, ops_headers = _operator_login(c)
    queue = c.get("/api/moderation/queue", headers=ops_headers).json()
    assert [f["content_id"] for f in queue] == ["m-1"]


def test_chat_read_requires_community_phase(client):
    c, services = client
    user_id, headers = _signup(c)
    assert c.get("/api/chat/messages", headers=headers).status_code == 403
    services.trust_store.save(UserTrustRecord(user_id=user_id, current_phase=Phase.community_readonly))
    assert c.get("/api/chat/messages", headers=headers).status_code == 200


def test_signup_with_operator_email_is_a_member():
    with tempfile.TemporaryDirectory() as tmpdir:
        services = build_services(Settings(home_dir=Path(tmpdir)))
        app.dependency_overrides[get_services] = lambda: services
        try:
            c = TestClient(app)
            resp = c.post(
                "/api/auth/signup",
                json={"username": "x", "email": "Admin@PulseMind.com", "password": "guess123"},
            )
            assert resp.status_code == 201
            assert resp.json()["user"]["role"] == "member"
            headers = {"Authorization": f"Bearer {resp.json()['token']}"}

            resp = c.post("/api/user/track-engagement", json={"action": "session"}, headers=headers)
            assert resp.json()["current_phase"] == "ai-only"
            assert resp.json()["readiness_score"] < 100
            assert c.get("/api/moderation/queue", headers=headers).status_code == 403
        finally:
            app.dependency_overrides.clear()


def test_operator_email_already_taken_is_not_promoted():
    with tempfile.TemporaryDirectory() as tmpdir:
        home = Path(tmpdir)
        first = build_services(Settings(home_dir=home, operator_email="ops@pulsemind.test"))
        squatter = first.register("squatter", "ops@pulsemind.test", "not-the-pass")

        seeded = build_services(
            Settings(home_dir=home, operator_email="ops@pulsemind.test", operator_password="ops-pass-123")
        )
        assert seeded.users.get_user(squatter.id).role.value == "member"
        assert seeded.audit.get_events(action="operator_seed_refused")


def test_operator_seeded_once(client):
    _, services = client
    user = services.ensure_operator()
    assert user.role.value == "admin"
    assert len(services.audit.get_events(action="operator_seeded")) == 1
    assert services.trust_store.get(user.id) is not None


def test_signup_cannot_claim_seeded_operator_email(client):
    c, _ = client
    resp = c.post(
        "/api/auth/signup",
        json={"username": "x", "email": "ops@pulsemind.test", "password": "guess123"},
    )
    assert resp.status_code == 400


def test_bad_mood_is_a_client_error(client):
    c, services = client
    user_id, headers = _signup(c)
    resp = c.post(
        "/api/user/track-engagement",
        json={"action": "assessment_complete", "payload": {"moodScore": "calm"}},
        headers=headers,
    )
    assert resp.status_code == 400
    assert services.trust_store.get(user_id).mood_stability_score is None

    resp = c.post(
        "/api/user/track-engagement",
        json={"action": "assessment_complete", "payload": {"moodScore": -400}},
        headers=headers,
    )
    assert resp.status_code == 200
    assert services.trust_store.get(user_id).mood_stability_score == 0


def test_members_cannot_rate_other_users(client):
    c, services = client
    victim_id, _ = _signup(c)
    _, headers = _signup(c, email="kim@example.com", username="kim")
    for _ in range(3):
        resp = c.post(
            "/api/user/reputation",
            json={"action": "negative", "user_id": victim_id},
            headers=headers,
        )
        assert resp.status_code == 403
    record = services.trust_store.get(victim_id)
    assert record.reputation_score == 50
    assert record.warning_count == 0

    _, ops_headers = _operator_login(c)
    resp = c.post(
        "/api/user/reputation",
        json={"action": "negative", "user_id": victim_id},
        headers=ops_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["warning_count"] == 1
