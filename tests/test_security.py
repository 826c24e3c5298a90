"""
Tests for session cookie signing.
"""

from datetime import timedelta

from jose import jwt

from meetdesk.core.security import create_session_token, decode_session_token


class TestSessionToken:

    def test_round_trip(self):
        token = create_session_token("110169484474386276334")

        assert decode_session_token(token) == "110169484474386276334"

    def test_expired_token_is_rejected(self):
        token = create_session_token("110169484474386276334", expires_delta=timedelta(seconds=-1))

        assert decode_session_token(token) is None

    def test_token_signed_with_other_key_is_rejected(self):
        forged = jwt.encode({"sub": "110169484474386276334"}, "not-the-secret", algorithm="HS256")

        assert decode_session_token(forged) is None

    def test_plain_google_id_is_rejected(self):
        assert decode_session_token("110169484474386276334") is None

    def test_missing_subject_is_rejected(self):
        token = create_session_token("")

        assert decode_session_token(token) is None
