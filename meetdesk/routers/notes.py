"""
Notes router - user-authored notes.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from meetdesk.db.session import get_db
from meetdesk.deps import require_session_identity
from meetdesk.models.note import Note
from meetdesk.schemas.note import NoteCreate, NoteOut


logger = logging.getLogger("meetdesk.routers.notes")


router = APIRouter(prefix="/api/notes", tags=["notes"])


@router.get("", response_model=List[NoteOut])
def list_notes(
    google_id: str = Depends(require_session_identity),
    db: Session = Depends(get_db),
):
    """The session user's notes, newest first."""
    stmt = (
        select(Note)
        .where(Note.user_google_id == google_id)
        .order_by(Note.created_at.desc(), Note.id.desc())
    )
    return db.execute(stmt).scalars().all()


@router.post("", response_model=NoteOut, status_code=status.HTTP_201_CREATED)
def create_note(
    body: NoteCreate,
    google_id: str = Depends(require_session_identity),
    db: Session = Depends(get_db),
):
    note = Note(user_google_id=google_id, title=body.title, summary=body.summary)
    db.add(note)
    db.commit()
    db.refresh(note)

    logger.info(f"Created note {note.id} for user {google_id}")
    return note
