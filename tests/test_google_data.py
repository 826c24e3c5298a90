"""
Tests for the Google data proxy routes and token persistence through them.
"""

from unittest.mock import MagicMock

import httpx
from sqlalchemy.exc import OperationalError

from meetdesk.db.session import get_session_factory
from meetdesk.main import app
from meetdesk.models.user import User


TOKEN_URL = "https://oauth2.googleapis.com/token"
EVENTS_URL = "https://www.googleapis.com/calendar/v3/calendars/primary/events"
GMAIL_URL = "https://gmail.googleapis.com/gmail/v1/users/me/messages"
DOCS_URL = "https://docs.googleapis.com/v1/documents"

MEET_EVENT = {
    "id": "evt-meet",
    "summary": "Weekly sync",
    "start": {"dateTime": "2026-10-12T10:00:00Z"},
    "end": {"dateTime": "2026-10-12T10:30:00Z"},
    "hangoutLink": "https://meet.google.com/abc-defg-hij",
    "attendees": [{"email": "jane@example.com"}],
    "conferenceData": {
        "conferenceId": "abc-defg-hij",
        "conferenceSolution": {"name": "Google Meet"},
    },
}

ZOOM_EVENT = {
    "id": "evt-zoom",
    "summary": "Vendor call",
    "start": {"dateTime": "2026-10-13T10:00:00Z"},
    "conferenceData": {"conferenceSolution": {"name": "Zoom Meeting"}},
}


class TestCalendarEvents:

    def test_returns_raw_items(self, logged_in, upstream):
        upstream.json("GET", EVENTS_URL, {"items": [MEET_EVENT, ZOOM_EVENT]})

        response = logged_in.get("/api/google/calendar/events")

        assert response.status_code == 200
        assert [e["id"] for e in response.json()] == ["evt-meet", "evt-zoom"]
        params = upstream.calls("GET", EVENTS_URL)[0].url.params
        assert params["maxResults"] == "10"
        assert params["singleEvents"] == "true"
        assert params["orderBy"] == "startTime"
        assert "timeMin" in params

    def test_requires_session(self, client):
        assert client.get("/api/google/calendar/events").status_code == 401

    def test_user_without_access_token_is_not_connected(self, client, user_factory, login_as):
        user_factory(google_id="no-token", access_token=None)

        response = login_as("no-token").get("/api/google/calendar/events")

        assert response.status_code == 400
        assert response.json()["message"] == "Google account not connected for this user"

    def test_upstream_error_returns_500(self, logged_in, upstream):
        upstream.json("GET", EVENTS_URL, {"error": {"message": "backendError"}}, status_code=503)

        response = logged_in.get("/api/google/calendar/events")

        assert response.status_code == 500
        assert response.json()["message"] == "Error fetching calendar events"

    def test_upstream_timeout_returns_504(self, logged_in, upstream):
        upstream.add("GET", EVENTS_URL, httpx.ReadTimeout("slow"))

        response = logged_in.get("/api/google/calendar/events")

        assert response.status_code == 504


class TestMeetEvents:

    def test_only_google_meet_events_are_mapped(self, logged_in, upstream):
        upstream.json("GET", EVENTS_URL, {"items": [MEET_EVENT, ZOOM_EVENT]})

        response = logged_in.get("/api/google/meet")

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["id"] == "evt-meet"
        assert data[0]["name"] == "Weekly sync"
        assert data[0]["startTime"] == "2026-10-12T10:00:00Z"
        assert data[0]["meetingCode"] == "abc-defg-hij"
        assert data[0]["meetingUrl"] == "https://meet.google.com/abc-defg-hij"
        assert data[0]["space"] == {"meetingCode": "abc-defg-hij"}
        assert upstream.calls("GET", EVENTS_URL)[0].url.params["maxResults"] == "50"


class TestGmailReports:

    def test_reports_are_built_from_metadata(self, logged_in, upstream):
        upstream.json("GET", GMAIL_URL, {"messages": [{"id": "m1"}]})
        upstream.json("GET", f"{GMAIL_URL}/m1", {
            "id": "m1",
            "snippet": "Notes attached",
            "payload": {"headers": [
                {"name": "Subject", "value": "Q3 planning"},
                {"name": "Date", "value": "Mon, 19 Oct 2026 09:12:00 +0000"},
                {"name": "From", "value": "Jane Doe <jane@example.com>"},
            ]},
        })

        response = logged_in.get("/api/gmail/reports")

        assert response.status_code == 200
        assert response.json() == [{
            "id": "m1",
            "source": "Gmail",
            "title": "Q3 planning",
            "tags": ["Email"],
            "owner": "Jane Doe",
            "date": "Mon, 19 Oct 2026 09:12:00 +0000",
            "snippet": "Notes attached",
        }]
        detail = upstream.calls("GET", f"{GMAIL_URL}/m1")[0].url.params
        assert detail.get_list("metadataHeaders") == ["Subject", "Date", "From"]

    def test_empty_mailbox(self, logged_in, upstream):
        upstream.json("GET", GMAIL_URL, {"resultSizeEstimate": 0})

        assert logged_in.get("/api/gmail/reports").json() == []


class TestDocs:

    def test_fetch_document(self, logged_in, upstream):
        upstream.json("GET", f"{DOCS_URL}/doc123", {"documentId": "doc123", "title": "Plan"})

        response = logged_in.get("/api/google/docs/doc123")

        assert response.status_code == 200
        assert response.json()["title"] == "Plan"

    def test_missing_document_returns_404(self, logged_in, upstream):
        upstream.json("GET", f"{DOCS_URL}/gone", {"error": {"code": 404}}, status_code=404)

        assert logged_in.get("/api/google/docs/gone").status_code == 404


class TestTokenRotationThroughRoutes:

    def test_rotated_token_is_saved_and_refresh_token_kept(self, login_as, db, expired_user, upstream):
        upstream.json("POST", TOKEN_URL, {"access_token": "ya29.rotated", "expires_in": 3599})
        upstream.json("GET", EVENTS_URL, {"items": []})

        response = login_as(expired_user.google_id).get("/api/google/calendar/events")

        assert response.status_code == 200
        db.expire_all()
        user = db.get(User, expired_user.google_id)
        assert user.access_token == "ya29.rotated"
        assert user.refresh_token == "1//stored-refresh"

    def test_rotated_refresh_token_replaces_stored_one(self, login_as, db, expired_user, upstream):
        upstream.json(
            "POST", TOKEN_URL,
            {"access_token": "ya29.rotated", "expires_in": 3599, "refresh_token": "1//rotated"},
        )
        upstream.json("GET", EVENTS_URL, {"items": []})

        login_as(expired_user.google_id).get("/api/google/calendar/events")

        db.expire_all()
        assert db.get(User, expired_user.google_id).refresh_token == "1//rotated"

    def test_persistence_failure_does_not_fail_the_request(self, login_as, expired_user, upstream, caplog):
        upstream.json("POST", TOKEN_URL, {"access_token": "ya29.rotated", "expires_in": 3599})
        upstream.json("GET", EVENTS_URL, {"items": [MEET_EVENT]})

        broken_session = MagicMock()
        broken_session.execute.side_effect = OperationalError("UPDATE users", {}, Exception("db down"))
        app.dependency_overrides[get_session_factory] = lambda: (lambda: broken_session)

        response = login_as(expired_user.google_id).get("/api/google/calendar/events")

        assert response.status_code == 200
        assert response.json()[0]["id"] == "evt-meet"
        broken_session.rollback.assert_called_once()
        broken_session.close.assert_called_once()
        assert "Failed to save rotated Google tokens" in caplog.text

    def test_revoked_refresh_token_asks_to_reconnect(self, login_as, expired_user, upstream):
        upstream.json("POST", TOKEN_URL, {"error": "invalid_grant"}, status_code=400)

        response = login_as(expired_user.google_id).get("/api/google/calendar/events")

        assert response.status_code == 400
        assert "reconnect" in response.json()["message"]

    def test_refresh_network_error_is_an_upstream_failure(self, login_as, expired_user, upstream, db):
        upstream.add("POST", TOKEN_URL, httpx.ConnectError("dns failure"))

        response = login_as(expired_user.google_id).get("/api/google/calendar/events")

        assert response.status_code == 500
        assert response.json() == {
            "message": "Error fetching calendar events",
            "error": "Network error: dns failure",
        }
        assert len(upstream.calls("POST", TOKEN_URL)) == 2
        db.expire_all()
        assert db.get(User, expired_user.google_id).refresh_token == "1//stored-refresh"
