"""
Google Auth Module - OAuth 2.0 Authentication for Google Services

This module handles the OAuth 2.0 flow for Google APIs and the authorized
session every Google service client makes its calls through.

OAuth 2.0 Flow Overview:
========================
1. User clicks "Connect Google" in the app
2. Backend generates authorization URL with the required scopes
3. User is redirected to Google's consent screen
4. Google redirects back with an authorization code
5. Backend exchanges code for access + refresh tokens
6. Tokens are stored in the Credential Store
7. Later API calls rotate the access token through AuthorizedSession
"""

from meetdesk.environments.google.auth.client import GoogleAuthClient
from meetdesk.environments.google.auth.schemas import (
    CALENDAR_SCOPES,
    CALLBACK_PATH,
    DEFAULT_SCOPES,
    DOCS_SCOPES,
    DRIVE_SCOPES,
    GMAIL_SCOPES,
    PROFILE_SCOPES,
    GoogleTokenResponse,
    GoogleUserInfo,
    build_redirect_uri,
    normalize_base_url,
)
from meetdesk.environments.google.auth.session import AuthorizedSession, TokenHandler

__all__ = [
    "AuthorizedSession",
    "GoogleAuthClient",
    "GoogleTokenResponse",
    "GoogleUserInfo",
    "TokenHandler",
    "build_redirect_uri",
    "normalize_base_url",
    "CALENDAR_SCOPES",
    "CALLBACK_PATH",
    "DEFAULT_SCOPES",
    "DOCS_SCOPES",
    "DRIVE_SCOPES",
    "GMAIL_SCOPES",
    "PROFILE_SCOPES",
]
