"""
Meetings router - meetings captured by the browser extension.

Endpoints:
==========
- POST   /api/meetings       → Store an extension payload (session optional)
- GET    /api/meetings       → The user's meetings, newest first
- DELETE /api/meetings/{id}  → Delete one of the user's meetings
"""

import json
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from meetdesk.core.errors import BadRequest, NotFound
from meetdesk.db.session import get_db
from meetdesk.deps import get_session_identity, require_session_identity
from meetdesk.schemas.meeting import MeetingCaptured, MeetingOut
from meetdesk.services.meetings import MeetingService


logger = logging.getLogger("meetdesk.routers.meetings")


router = APIRouter(prefix="/api/meetings", tags=["meetings"])


@router.post("", response_model=MeetingCaptured, status_code=status.HTTP_201_CREATED)
async def capture_meeting(
    request: Request,
    google_id: Optional[str] = Depends(get_session_identity),
    db: Session = Depends(get_db),
):
    """
    Accept a meeting payload from the extension.

    The body is any JSON object; known fields are normalized and the
    whole payload is stored as-is. A userId in the payload wins over the
    session identity.
    """
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise BadRequest("Error processing request", error="Body is not valid JSON") from e

    if not isinstance(payload, dict):
        raise BadRequest("Error processing request", error="Body must be a JSON object")

    try:
        meeting = MeetingService(db).capture(payload, session_google_id=google_id)
    except ValueError as e:
        raise BadRequest("Error processing request", error=str(e)) from e

    return MeetingCaptured(id=meeting.id)


@router.get("", response_model=List[MeetingOut])
def list_meetings(
    google_id: str = Depends(require_session_identity),
    db: Session = Depends(get_db),
):
    return MeetingService(db).list_for_user(google_id)


@router.delete("/{meeting_id}")
def delete_meeting(
    meeting_id: str,
    google_id: str = Depends(require_session_identity),
    db: Session = Depends(get_db),
):
    if not MeetingService(db).delete_for_user(meeting_id, google_id):
        raise NotFound("Meeting not found")
    return {"message": "Meeting deleted successfully"}
