"""
Google Auth Router - OAuth 2.0 sign-in with Google.

Signing in with Google is both the login of the app and the connection of
the Google integration: the callback stores the user's token pair in the
Credential Store and sets the session cookies.

Endpoints:
==========
- GET /api/auth/google          → Redirect to Google OAuth consent screen
- GET /api/auth/google/callback → Exchange code, upsert credentials, set cookies

OAuth Flow:
===========
1. Frontend sends the browser to GET /api/auth/google
2. Backend redirects to Google's consent screen (offline access, forced consent)
3. Google redirects to /api/auth/google/callback with a code
4. Backend exchanges the code, fetches the profile, upserts the user record
5. Browser is redirected to {base}/integrations with the session cookies set
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from meetdesk.core.config import settings
from meetdesk.core.errors import (
    BadRequest,
    IncompleteProviderProfile,
    MissingAuthorizationCode,
    ServiceNotConfigured,
    UpstreamFailure,
    UpstreamTimeout,
)
from meetdesk.core.security import set_session_cookies
from meetdesk.db.session import get_db
from meetdesk.deps import get_auth_client
from meetdesk.environments.base import AuthenticationError, UpstreamTimeoutError
from meetdesk.environments.google.auth import (
    DEFAULT_SCOPES,
    GoogleAuthClient,
    build_redirect_uri,
    normalize_base_url,
)
from meetdesk.services.credential_store import CredentialStore


logger = logging.getLogger("meetdesk.routers.google_auth")


router = APIRouter(prefix="/api/auth/google", tags=["google-auth"])


def resolve_base_url(request: Request) -> str:
    """
    Public base URL of the app, without a trailing slash.

    APP_URL wins when configured; otherwise the scheme and host the
    request came in on.
    """
    if settings.APP_URL:
        return normalize_base_url(settings.APP_URL)
    return normalize_base_url(f"{request.url.scheme}://{request.url.netloc}")


@router.get("")
async def google_login(
    request: Request,
    auth_client: GoogleAuthClient = Depends(get_auth_client),
):
    """
    Redirect the user to Google's OAuth consent screen.

    Requests Calendar, Gmail, Docs and Drive read-only access plus the
    profile and email scopes.
    """
    if not auth_client.client_id or not auth_client.client_secret:
        logger.error("Google OAuth not configured - missing GOOGLE_CLIENT_ID/SECRET")
        raise ServiceNotConfigured(
            "Google OAuth is not configured. Please set GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET."
        )

    redirect_uri = build_redirect_uri(resolve_base_url(request))
    auth_url = auth_client.get_authorization_url(
        scopes=DEFAULT_SCOPES,
        redirect_uri=redirect_uri,
    )

    logger.info(f"Initiating Google OAuth, redirect_uri={redirect_uri}")
    return RedirectResponse(url=auth_url, status_code=status.HTTP_302_FOUND)


@router.get("/callback")
async def google_callback(
    request: Request,
    code: Optional[str] = Query(None, description="Authorization code from Google"),
    error: Optional[str] = Query(None, description="Error from Google"),
    error_description: Optional[str] = Query(None, description="Error details"),
    auth_client: GoogleAuthClient = Depends(get_auth_client),
    db: Session = Depends(get_db),
):
    """
    Handle Google OAuth callback.

    Flow:
        1. Reject denied consent and missing codes (nothing is stored)
        2. Exchange code for tokens
        3. Fetch the Google profile, which must be complete
        4. Upsert the user record, keeping an existing refresh token
        5. Set session cookies and redirect to the integrations page
    """
    if error:
        logger.warning(f"Google OAuth error: {error} - {error_description}")
        raise BadRequest("Google authorization failed", error=error_description or error)

    if not code:
        logger.warning("OAuth callback without an authorization code")
        raise MissingAuthorizationCode()

    base_url = resolve_base_url(request)

    try:
        tokens = await auth_client.exchange_code_for_tokens(
            code=code,
            redirect_uri=build_redirect_uri(base_url),
        )
        profile = await auth_client.get_user_info(tokens.access_token)
    except UpstreamTimeoutError as e:
        raise UpstreamTimeout("Timed out talking to Google", error=str(e)) from e
    except AuthenticationError as e:
        logger.error(f"Google sign-in failed: {e}")
        raise UpstreamFailure("Authentication failed", error=str(e)) from e

    missing = profile.missing_fields()
    if missing:
        logger.error(f"Google profile is missing fields: {', '.join(missing)}")
        raise IncompleteProviderProfile(
            error="Failed to retrieve complete user information from Google."
        )

    user = CredentialStore(db).upsert_login(profile, tokens)

    response = RedirectResponse(url=f"{base_url}/integrations", status_code=status.HTTP_302_FOUND)
    set_session_cookies(response, user.google_id, user.email)

    logger.info(f"User {user.google_id} signed in with Google")
    return response
