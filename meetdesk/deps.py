"""
Dependencies module - reusable FastAPI dependencies for route handlers.

Session resolution:
===================
1. get_session_identity: verified Google id from the user_id cookie, or None
2. require_session_identity: same, but 401 when there is no valid session
3. get_current_user: the Credential Store record, 400 when not connected
4. get_google_session: an AuthorizedSession for that user whose rotated
   tokens are written back to the Credential Store
"""

import logging
from typing import Callable, Optional

import httpx
from fastapi import Cookie, Depends
from sqlalchemy.orm import Session

from meetdesk.ai.providers import AIProvider, GeminiProvider
from meetdesk.core.errors import IntegrationNotConnected, Unauthenticated
from meetdesk.core.security import decode_session_token
from meetdesk.db.session import get_db, get_session_factory
from meetdesk.environments.base import OAuthTokens
from meetdesk.environments.google.auth import AuthorizedSession, GoogleAuthClient
from meetdesk.models.user import User
from meetdesk.services.credential_store import CredentialStore
from meetdesk.services.notion_export import NotionExporter
from meetdesk.services.summarizer import MeetingSummarizer
from meetdesk.services.token_persistence import TokenRefreshPersister


logger = logging.getLogger("meetdesk.deps")


def get_http_transport() -> Optional[httpx.AsyncBaseTransport]:
    """
    Transport for outgoing Google calls. None means real network.

    Tests override this with an httpx.MockTransport.
    """
    return None


def get_auth_client(
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_http_transport),
) -> GoogleAuthClient:
    return GoogleAuthClient(transport=transport)


def get_session_identity(user_id: Optional[str] = Cookie(None)) -> Optional[str]:
    """
    Google id from the signed user_id cookie.

    Returns:
        The Google id, or None for a missing, expired or forged cookie
    """
    if not user_id:
        return None

    google_id = decode_session_token(user_id)
    if google_id is None:
        logger.warning("Rejected an invalid user_id session cookie")
    return google_id


def require_session_identity(
    google_id: Optional[str] = Depends(get_session_identity),
) -> str:
    """
    Raises:
        Unauthenticated (401): No valid session cookie
    """
    if google_id is None:
        raise Unauthenticated()
    return google_id


def get_current_user(
    google_id: str = Depends(require_session_identity),
    db: Session = Depends(get_db),
) -> User:
    """
    Credential record for the session's identity.

    Raises:
        IntegrationNotConnected (400): The cookie outlived the record, or the
            record holds no access token
    """
    user = CredentialStore(db).get(google_id)
    if user is None or not user.is_connected:
        raise IntegrationNotConnected()
    return user


def get_google_session(
    user: User = Depends(get_current_user),
    auth_client: GoogleAuthClient = Depends(get_auth_client),
    session_factory: Callable[[], Session] = Depends(get_session_factory),
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_http_transport),
) -> AuthorizedSession:
    """
    AuthorizedSession for the current user.

    Rotated tokens are persisted through TokenRefreshPersister before the
    triggering API call returns to the route.
    """
    session = AuthorizedSession(
        tokens=OAuthTokens(
            access_token=user.access_token,
            refresh_token=user.refresh_token,
            expires_at=user.expires_at,
            scopes=user.scopes,
        ),
        auth_client=auth_client,
        transport=transport,
    )
    session.on_tokens(TokenRefreshPersister(session_factory).for_user(user.google_id))
    return session


def get_ai_provider() -> AIProvider:
    return GeminiProvider()


def get_summarizer(provider: AIProvider = Depends(get_ai_provider)) -> MeetingSummarizer:
    return MeetingSummarizer(provider)


def get_notion_exporter(
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_http_transport),
) -> NotionExporter:
    return NotionExporter(transport=transport)
