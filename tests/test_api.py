"""HTTP-level tests: status codes and the {success, data | error} envelope."""
import time

from fastapi.testclient import TestClient

from app.models import EventStatus
from app.services.event_service import EventService
from app.services.qr_service import QRService
from app.utils.security import rate_limit_check, rate_limiter
from main import create_app
from tests.conftest import auth_headers, make_event


def _event_json(**overrides):
    body = {
        "title": "Tech Talk",
        "description": "Monthly developer meetup",
        "type": "conference",
        "start_date": "2025-06-01T09:00:00",
        "end_date": "2025-06-01T11:00:00",
    }
    body.update(overrides)
    return body


def _create_event(client, organizer, **overrides):
    resp = client.post("/api/events", json=_event_json(**overrides), headers=auth_headers(organizer.id))
    assert resp.status_code == 201
    return resp.json()["data"]


class TestEvents:

    def test_create_event_uses_token_user_as_organizer(self, client, organizer):
        resp = client.post("/api/events", json=_event_json(), headers=auth_headers(organizer.id))

        assert resp.status_code == 201
        body = resp.json()
        assert body["success"] is True
        assert body["message"] == "Event created successfully"
        assert body["data"]["organizer_id"] == organizer.id
        assert body["data"]["registration_deadline"] == "2025-05-31T09:00:00"
        assert body["data"]["venue"]["name"] == "To be defined"

    def test_create_event_with_explicit_organizer_and_location(self, client, organizer):
        resp = client.post("/api/events", json=_event_json(
            organizer_id=organizer.id,
            venue={"name": "Salle Virunga", "address": "12 Avenue du Lac", "city": "Goma"},
        ))

        assert resp.status_code == 201
        assert resp.json()["data"]["venue"]["city"] == "Goma"

    def test_create_event_missing_fields(self, client, organizer):
        resp = client.post("/api/events", json={"title": "Half an event"}, headers=auth_headers(organizer.id))

        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert body["error"].startswith("Missing required fields")
        assert body["details"] == ["description", "type", "start_date", "end_date"]

    def test_create_event_without_organizer(self, client):
        resp = client.post("/api/events", json=_event_json())

        assert resp.status_code == 400
        assert resp.json()["details"] == ["organizer_id"]

    def test_create_event_bad_dates(self, client, organizer):
        resp = client.post(
            "/api/events",
            json=_event_json(end_date="2025-06-01T08:00:00"),
            headers=auth_headers(organizer.id),
        )

        assert resp.status_code == 400
        assert resp.json()["success"] is False

    def test_create_event_rejects_malformed_body(self, client, organizer):
        resp = client.post(
            "/api/events",
            json=_event_json(capacity=0),
            headers=auth_headers(organizer.id),
        )

        assert resp.status_code == 400
        assert resp.json()["details"] == ["capacity"]

    def test_create_event_with_out_of_range_start(self, client, organizer):
        resp = client.post(
            "/api/events",
            json=_event_json(start_date="0001-01-01T09:00:00", end_date="0001-01-01T11:00:00"),
            headers=auth_headers(organizer.id),
        )

        assert resp.status_code == 400
        assert resp.json()["success"] is False
        assert resp.json()["details"] == ["start_date"]

    def test_update_event_with_out_of_range_date(self, client, organizer):
        event = _create_event(client, organizer)

        resp = client.put(f"/api/events/{event['id']}", json={"start_date": "0001-01-01T00:30:00+01:00"})

        assert resp.status_code == 400
        assert resp.json()["details"] == ["start_date"]

    def test_get_event_not_found(self, client):
        resp = client.get("/api/events/does-not-exist")

        assert resp.status_code == 404
        assert resp.json() == {"success": False, "error": "Event not found", "error_code": "not_found"}

    def test_list_events_with_pagination(self, client, organizer):
        for n in range(3):
            _create_event(client, organizer, title=f"Meetup {n}")

        resp = client.get("/api/events", params={"page": 2, "limit": 2})

        assert resp.status_code == 200
        body = resp.json()
        assert len(body["data"]) == 1
        assert body["pagination"] == {"page": 2, "limit": 2, "total": 3, "pages": 2}

    def test_update_event_partial(self, client, organizer):
        event = _create_event(client, organizer)

        resp = client.put(f"/api/events/{event['id']}", json={"title": "Renamed"})

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["title"] == "Renamed"
        assert data["description"] == event["description"]

    def test_update_event_empty_body_is_noop(self, client, organizer):
        event = _create_event(client, organizer)

        resp = client.put(f"/api/events/{event['id']}", json={})

        assert resp.status_code == 200
        assert resp.json()["data"] == event

    def test_delete_event(self, client, organizer):
        event = _create_event(client, organizer)

        resp = client.delete(f"/api/events/{event['id']}")
        assert resp.status_code == 200
        assert resp.json()["data"]["id"] == event["id"]

        assert client.get(f"/api/events/{event['id']}").status_code == 404

    def test_my_events_requires_token(self, client):
        resp = client.get("/api/events/my-events")

        assert resp.status_code == 401
        assert resp.json()["success"] is False

    def test_my_events(self, client, organizer):
        _create_event(client, organizer)

        resp = client.get("/api/events/my-events", headers=auth_headers(organizer.id))

        assert resp.status_code == 200
        assert len(resp.json()["data"]) == 1


class TestParticipants:

    def test_register_and_list(self, client, db_session, organizer, attendee):
        event = make_event(db_session, organizer)

        resp = client.post(f"/api/events/{event.id}/participants", json={"user_id": attendee.id})
        assert resp.status_code == 201
        participant = resp.json()["data"]
        assert participant["qrCode"].startswith("data:image/png;base64,")

        resp = client.get(f"/api/events/{event.id}/participants")
        assert resp.status_code == 200
        assert [p["id"] for p in resp.json()["data"]] == [participant["id"]]

    def test_duplicate_registration_conflicts(self, client, db_session, organizer, attendee):
        event = make_event(db_session, organizer)
        client.post(f"/api/events/{event.id}/participants", json={"user_id": attendee.id})

        resp = client.post(f"/api/events/{event.id}/participants", json={"user_id": attendee.id})

        assert resp.status_code == 409
        assert resp.json()["error_code"] == "conflict"

    def test_join_event(self, client, db_session, organizer, attendee):
        event = make_event(db_session, organizer)

        resp = client.post(f"/api/events/{event.id}/join", headers=auth_headers(attendee.id))
        assert resp.status_code == 201

        resp = client.get("/api/events/my-participations", headers=auth_headers(attendee.id))
        assert resp.status_code == 200
        assert resp.json()["data"][0]["participation_status"] == "registered"

    def test_join_event_requires_token(self, client, db_session, organizer):
        event = make_event(db_session, organizer)

        resp = client.post(f"/api/events/{event.id}/join")

        assert resp.status_code == 401

    def test_update_and_delete_participant(self, client, db_session, organizer, attendee):
        event = make_event(db_session, organizer)
        participant = client.post(
            f"/api/events/{event.id}/participants", json={"user_id": attendee.id}
        ).json()["data"]
        url = f"/api/events/{event.id}/participants/{participant['id']}"

        resp = client.put(url, json={"status": "confirmed"})
        assert resp.status_code == 200
        assert resp.json()["data"]["status"] == "confirmed"

        resp = client.put(url, json={"feedback_rating": 9})
        assert resp.status_code == 400

        assert client.delete(url).status_code == 200
        assert client.get(url).status_code == 404

    def test_qr_png(self, client, db_session, organizer, attendee):
        event = make_event(db_session, organizer)
        participant = client.post(
            f"/api/events/{event.id}/participants", json={"user_id": attendee.id}
        ).json()["data"]

        resp = client.get(f"/api/events/{event.id}/participants/{participant['id']}/qr.png")

        assert resp.status_code == 200
        assert resp.headers["content-type"] == "image/png"
        assert resp.content.startswith(b"\x89PNG")

    def test_check_in(self, client, db_session, organizer, attendee):
        event = make_event(db_session, organizer)
        participant = client.post(
            f"/api/events/{event.id}/participants", json={"user_id": attendee.id}
        ).json()["data"]
        qr_payload = QRService.build_payload(participant["id"], event.id, attendee.id)

        resp = client.post("/api/events/check-in", json={"qrCode": qr_payload})
        assert resp.status_code == 200
        assert resp.json()["message"] == "Check-in successful"
        assert resp.json()["data"]["participant"]["status"] == "attended"

        resp = client.post("/api/events/check-in", json={"qrCode": qr_payload})
        assert resp.status_code == 200
        assert resp.json()["data"]["was_already_checked_in"] is True

    def test_check_in_invalid_payload(self, client):
        resp = client.post("/api/events/check-in", json={"qrCode": "garbage"})

        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid QR code"


class TestProfile:

    def test_requires_token(self, client):
        assert client.get("/api/users/me").status_code == 401

    def test_rejects_bad_token(self, client):
        resp = client.get("/api/users/me", headers={"Authorization": "Bearer not-a-jwt"})

        assert resp.status_code == 401
        assert resp.json()["error"] == "Invalid or expired token"

    def test_get_profile(self, client, attendee):
        resp = client.get("/api/users/me", headers=auth_headers(attendee.id))

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["email"] == "attendee@example.com"
        assert "password_hash" not in data

    def test_update_profile(self, client, attendee):
        resp = client.put(
            "/api/users/me",
            json={"company": "Kivu Tech", "email": "Neema.Bahati@example.com"},
            headers=auth_headers(attendee.id),
        )

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["company"] == "Kivu Tech"
        assert data["first_name"] == "Neema"

    def test_update_profile_email_taken(self, client, organizer, attendee):
        resp = client.put(
            "/api/users/me",
            json={"email": "organizer@example.com"},
            headers=auth_headers(attendee.id),
        )

        assert resp.status_code == 409

    def test_update_profile_blank_name(self, client, attendee):
        resp = client.put("/api/users/me", json={"first_name": "  "}, headers=auth_headers(attendee.id))

        assert resp.status_code == 400
        assert resp.json()["details"] == ["first_name"]

    def test_update_profile_invalid_email(self, client, attendee):
        resp = client.put("/api/users/me", json={"email": "not-an-email"}, headers=auth_headers(attendee.id))

        assert resp.status_code == 400

    def test_unknown_user(self, client):
        resp = client.get("/api/users/me", headers=auth_headers("ghost"))

        assert resp.status_code == 404

    def test_change_password(self, client, attendee):
        headers = auth_headers(attendee.id)

        resp = client.put("/api/users/me/password", json={
            "current_password": "wrong", "new_password": "n3w-pass",
        }, headers=headers)
        assert resp.status_code == 400

        resp = client.put("/api/users/me/password", json={
            "current_password": "s3cret-pass", "new_password": "n3w-pass",
        }, headers=headers)
        assert resp.status_code == 200

        resp = client.put("/api/users/me/password", json={
            "current_password": "n3w-pass", "new_password": "another",
        }, headers=headers)
        assert resp.status_code == 200


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_check_in_rate_limited(client, monkeypatch):
    monkeypatch.setattr("app.core.config.settings.RATE_LIMIT_PER_MINUTE", 2)

    for _ in range(2):
        assert client.post("/api/events/check-in", json={"qrCode": "garbage"}).status_code == 400

    resp = client.post("/api/events/check-in", json={"qrCode": "garbage"})
    assert resp.status_code == 429
    assert resp.json()["error_code"] == "rate_limited"


def test_public_catalogue_lists_published_events_with_counts(client, db_session, organizer, attendee):
    published = make_event(db_session, organizer, title="Open Day")
    make_event(db_session, organizer, title="Still a draft", status=EventStatus.draft)
    client.post(f"/api/events/{published.id}/participants", json={"user_id": attendee.id})

    resp = client.get("/api/events/public", params={"status": "draft"})

    assert resp.status_code == 200
    body = resp.json()
    assert [e["title"] for e in body["data"]] == ["Open Day"]
    assert body["data"][0]["participants_count"] == 1
    assert body["pagination"]["total"] == 1


def test_unexpected_error_returns_envelope(database, monkeypatch):
    def broken_lookup(db, event_id):
        raise RuntimeError("unexpected")

    monkeypatch.setattr(EventService, "get_event", broken_lookup)

    with TestClient(create_app(database), raise_server_exceptions=False) as c:
        resp = c.get("/api/events/anything")

    assert resp.status_code == 500
    assert resp.json() == {
        "success": False,
        "error": "An unexpected storage error occurred",
        "error_code": "internal_error",
    }


def test_rate_limiter_forgets_idle_clients():
    rate_limiter["10.0.0.1"] = [time.time() - 120]

    assert rate_limit_check("10.0.0.2", limit=5) is True

    assert "10.0.0.1" not in rate_limiter
    assert len(rate_limiter["10.0.0.2"]) == 1
