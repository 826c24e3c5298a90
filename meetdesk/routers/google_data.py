"""
Google data router - read-only proxies to Calendar, Meet, Gmail and Docs.

Every endpoint runs through the user's AuthorizedSession, so an expired
access token is refreshed (and persisted) transparently.

Endpoints:
==========
- GET /api/google/calendar/events → Next 10 events of the primary calendar
- GET /api/google/meet            → Google Meet events of the last 30 days
- GET /api/gmail/reports          → The 10 most recent emails
- GET /api/google/docs/{doc_id}   → A Google Docs document
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from meetdesk.core.errors import BadRequest, NotFound, translate_provider_errors
from meetdesk.deps import get_google_session
from meetdesk.environments.base import APIError
from meetdesk.environments.google import (
    AuthorizedSession,
    GmailClient,
    GmailReport,
    GoogleCalendarClient,
    GoogleDocsClient,
    MeetEvent,
)
from meetdesk.environments.google.docs import extract_document_id


logger = logging.getLogger("meetdesk.routers.google_data")


router = APIRouter(prefix="/api", tags=["google-data"])


@router.get("/google/calendar/events")
async def upcoming_calendar_events(
    session: AuthorizedSession = Depends(get_google_session),
) -> List[Dict[str, Any]]:
    """Raw Calendar API items, starting now, ordered by start time."""
    with translate_provider_errors("calendar events"):
        return await GoogleCalendarClient(session).list_upcoming_events(max_results=10)


@router.get(
    "/google/meet",
    response_model=List[MeetEvent],
    response_model_by_alias=True,
)
async def recent_meet_events(
    session: AuthorizedSession = Depends(get_google_session),
):
    with translate_provider_errors("Google Meet data"):
        return await GoogleCalendarClient(session).list_meet_events(max_results=50)


@router.get("/gmail/reports", response_model=List[GmailReport])
async def gmail_reports(
    session: AuthorizedSession = Depends(get_google_session),
):
    with translate_provider_errors("Gmail reports"):
        return await GmailClient(session).list_reports(max_results=10)


@router.get("/google/docs/{doc_id}")
async def google_document(
    doc_id: str,
    session: AuthorizedSession = Depends(get_google_session),
) -> Dict[str, Any]:
    """
    Fetch a document. doc_id may be a bare id or a URL-encoded Docs link.

    Raises:
        BadRequest (400): doc_id is neither
        NotFound (404): The document does not exist or is not shared
    """
    document_id = extract_document_id(doc_id)
    if not document_id:
        raise BadRequest("Invalid Google Docs document id")

    with translate_provider_errors("document"):
        try:
            return await GoogleDocsClient(session).get_document(document_id)
        except APIError as e:
            if e.status_code == 404:
                raise NotFound(str(e)) from e
            raise
