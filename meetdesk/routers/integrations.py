"""
Integrations router - connection status of external services.

Only Google is a real integration today; Zoom and Outlook are listed so
the frontend can render them and are never connected.

Endpoints:
==========
- GET /api/integrations       → Status list, session optional
- PUT /api/integrations/{id}  → Disconnect (Google only), session required
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from meetdesk.core.security import clear_session_cookies
from meetdesk.db.session import get_db
from meetdesk.deps import get_session_identity, require_session_identity
from meetdesk.schemas.integration import IntegrationStatus, IntegrationUpdate, IntegrationUpdateOut
from meetdesk.services.credential_store import CredentialStore


logger = logging.getLogger("meetdesk.routers.integrations")


router = APIRouter(prefix="/api/integrations", tags=["integrations"])


GOOGLE_INTEGRATION_ID = 1

INTEGRATIONS = (
    (GOOGLE_INTEGRATION_ID, "Google"),
    (2, "Zoom"),
    (3, "Outlook"),
)


def integration_statuses(google_connected: bool) -> List[IntegrationStatus]:
    return [
        IntegrationStatus(
            id=integration_id,
            name=name,
            connected=google_connected if integration_id == GOOGLE_INTEGRATION_ID else False,
        )
        for integration_id, name in INTEGRATIONS
    ]


@router.get("", response_model=List[IntegrationStatus])
def list_integrations(
    google_id: Optional[str] = Depends(get_session_identity),
    db: Session = Depends(get_db),
):
    """
    Google is connected when a credential record exists for the session.
    Without a session every integration is reported disconnected.
    """
    connected = bool(google_id) and CredentialStore(db).exists(google_id)
    return integration_statuses(connected)


@router.put("/{integration_id}", response_model=IntegrationUpdateOut)
def update_integration(
    integration_id: int,
    body: IntegrationUpdate,
    response: Response,
    google_id: str = Depends(require_session_identity),
):
    """
    Disconnecting Google logs the browser out by clearing both session
    cookies. The stored credentials stay, so signing in again reconnects
    without losing the refresh token. Other updates are echoed back.
    """
    if integration_id == GOOGLE_INTEGRATION_ID and not body.connected:
        clear_session_cookies(response)
        logger.info(f"User {google_id} disconnected Google")

    return IntegrationUpdateOut(id=integration_id, connected=body.connected)
