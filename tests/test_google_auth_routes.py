"""
Tests for the Google sign-in routes (/api/auth/google, /api/auth/google/callback).
"""

from urllib.parse import parse_qs, unquote, urlparse

import httpx
import pytest
from sqlalchemy import func, select

from meetdesk.core.config import settings
from meetdesk.core.security import decode_session_token
from meetdesk.deps import get_auth_client
from meetdesk.environments.google.auth import GoogleAuthClient
from meetdesk.main import app
from meetdesk.models.user import User


TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"
GOOGLE_ID = "110169484474386276334"

PROFILE = {
    "id": GOOGLE_ID,
    "email": "jane@example.com",
    "verified_email": True,
    "name": "Jane Doe",
    "picture": "https://lh3.googleusercontent.com/a/jane",
}


def _token_body(refresh_token=None, access_token="ya29.fresh"):
    body = {"access_token": access_token, "expires_in": 3599, "token_type": "Bearer"}
    if refresh_token is not None:
        body["refresh_token"] = refresh_token
    return body


def _user_count(db) -> int:
    return db.execute(select(func.count()).select_from(User)).scalar_one()


class TestBeginAuthorization:

    @pytest.mark.parametrize("app_url", ["https://app.example.com", "https://app.example.com/"])
    def test_redirect_uri_uses_app_url_without_trailing_slash(self, client, monkeypatch, app_url):
        monkeypatch.setattr(settings, "APP_URL", app_url)

        response = client.get("/api/auth/google", follow_redirects=False)

        assert response.status_code == 302
        query = parse_qs(urlparse(response.headers["location"]).query)
        assert query["redirect_uri"] == ["https://app.example.com/api/auth/google/callback"]
        assert query["access_type"] == ["offline"]
        assert query["prompt"] == ["consent"]

    def test_redirect_uri_falls_back_to_request_host(self, client, monkeypatch):
        monkeypatch.setattr(settings, "APP_URL", "")

        response = client.get("/api/auth/google", follow_redirects=False)

        query = parse_qs(urlparse(response.headers["location"]).query)
        assert query["redirect_uri"] == ["http://testserver/api/auth/google/callback"]

    def test_unconfigured_client_returns_503(self, client, monkeypatch):
        monkeypatch.setattr(settings, "GOOGLE_CLIENT_ID", "")
        monkeypatch.setattr(settings, "GOOGLE_CLIENT_SECRET", "")
        app.dependency_overrides[get_auth_client] = lambda: GoogleAuthClient(client_id="", client_secret="")

        response = client.get("/api/auth/google", follow_redirects=False)

        assert response.status_code == 503


class TestCompleteAuthorization:

    @pytest.fixture(autouse=True)
    def _no_app_url(self, monkeypatch):
        monkeypatch.setattr(settings, "APP_URL", "")

    def test_missing_code_is_rejected_without_writes(self, client, db, upstream):
        response = client.get("/api/auth/google/callback", follow_redirects=False)

        assert response.status_code == 400
        assert response.json() == {"message": "Code not found"}
        assert _user_count(db) == 0
        assert upstream.requests == []

    def test_denied_consent_is_rejected(self, client, db):
        response = client.get("/api/auth/google/callback?error=access_denied", follow_redirects=False)

        assert response.status_code == 400
        assert response.json()["error"] == "access_denied"
        assert _user_count(db) == 0

    def test_success_sets_cookies_and_redirects(self, client, db, upstream):
        upstream.json("POST", TOKEN_URL, _token_body(refresh_token="1//granted"))
        upstream.json("GET", USERINFO_URL, PROFILE)

        response = client.get("/api/auth/google/callback?code=4/abc", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == "http://testserver/integrations"

        assert decode_session_token(response.cookies["user_id"]) == GOOGLE_ID
        assert response.cookies["user_email"] == "jane%40example.com"
        assert unquote(response.cookies["user_email"]) == PROFILE["email"]
        set_cookie = ",".join(response.headers.get_list("set-cookie")).lower()
        assert "httponly" in set_cookie
        assert "samesite=lax" in set_cookie
        assert "max-age=604800" in set_cookie
        assert 'user_email="' not in set_cookie

        user = db.get(User, GOOGLE_ID)
        assert user.access_token == "ya29.fresh"
        assert user.refresh_token == "1//granted"
        assert user.picture == PROFILE["picture"]

    def test_exchange_uses_same_redirect_uri(self, client, upstream, monkeypatch):
        monkeypatch.setattr(settings, "APP_URL", "https://app.example.com/")
        upstream.json("POST", TOKEN_URL, _token_body())
        upstream.json("GET", USERINFO_URL, PROFILE)

        response = client.get("/api/auth/google/callback?code=4/abc", follow_redirects=False)

        sent = upstream.form_data(upstream.calls("POST", TOKEN_URL)[0])
        assert sent["redirect_uri"] == "https://app.example.com/api/auth/google/callback"
        assert response.headers["location"] == "https://app.example.com/integrations"

    def test_relogin_without_refresh_token_keeps_stored_one(self, client, db, upstream):
        upstream.json("GET", USERINFO_URL, PROFILE)
        upstream.add(
            "POST", TOKEN_URL,
            httpx.Response(200, json=_token_body(refresh_token="1//first", access_token="ya29.one")),
            httpx.Response(200, json=_token_body(access_token="ya29.two")),
        )

        client.get("/api/auth/google/callback?code=4/first", follow_redirects=False)
        client.get("/api/auth/google/callback?code=4/second", follow_redirects=False)

        db.expire_all()
        user = db.get(User, GOOGLE_ID)
        assert user.access_token == "ya29.two"
        assert user.refresh_token == "1//first"
        assert _user_count(db) == 1

    def test_incomplete_profile_fails_without_writes(self, client, db, upstream):
        upstream.json("POST", TOKEN_URL, _token_body(refresh_token="1//granted"))
        upstream.json("GET", USERINFO_URL, {"id": GOOGLE_ID, "email": "jane@example.com"})

        response = client.get("/api/auth/google/callback?code=4/abc", follow_redirects=False)

        assert response.status_code == 500
        assert response.json() == {
            "message": "Authentication failed",
            "error": "Failed to retrieve complete user information from Google.",
        }
        assert _user_count(db) == 0
        assert "user_id" not in response.cookies

    def test_rejected_code_returns_500(self, client, db, upstream):
        upstream.json("POST", TOKEN_URL, {"error": "invalid_grant"}, status_code=400)

        response = client.get("/api/auth/google/callback?code=4/used", follow_redirects=False)

        assert response.status_code == 500
        assert response.json()["message"] == "Authentication failed"
        assert len(upstream.calls("POST", TOKEN_URL)) == 1
        assert _user_count(db) == 0
