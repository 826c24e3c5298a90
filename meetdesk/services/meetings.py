"""
Meeting capture service - stores payloads posted by the browser extension.

Extension versions disagree on field names, so a handful of well-known
aliases are accepted for each column. The full payload is kept in
raw_payload either way.
"""

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from meetdesk.models.meeting import Meeting


logger = logging.getLogger("meetdesk.services.meetings")


TITLE_KEYS = ("meetingTitle", "title", "meeting_code")
END_TIMESTAMP_KEYS = ("meetingEndTimestamp", "ended_at", "timestamp")
TRANSCRIPT_KEYS = ("transcript", "full_transcript", "text", "content")


def _first(payload: Dict[str, Any], keys: tuple) -> Any:
    for key in keys:
        value = payload.get(key)
        if value:
            return value
    return None


def parse_timestamp(value: Any) -> datetime:
    """
    Parse an ISO-8601 string or a Unix timestamp (seconds or milliseconds).

    Raises:
        ValueError: If the value is neither
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid timestamp: {value!r}")
    if isinstance(value, (int, float)):
        seconds = value / 1000 if value > 1e11 else value
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError) as e:
            raise ValueError(f"Timestamp out of range: {value!r}") from e
    if isinstance(value, str):
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    raise ValueError(f"Invalid timestamp: {value!r}")


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def normalize_capture(payload: Dict[str, Any], session_google_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Map an extension payload onto Meeting columns.

    Args:
        payload: JSON object posted by the extension
        session_google_id: Owner to use when the payload has no userId

    Raises:
        ValueError: If the end timestamp cannot be parsed
    """
    end_ts = _first(payload, END_TIMESTAMP_KEYS)

    return {
        "id": str(payload.get("id") or uuid.uuid4()),
        "user_google_id": payload.get("userId") or session_google_id,
        "title": str(_first(payload, TITLE_KEYS) or "Meeting"),
        "meeting_timestamp": parse_timestamp(end_ts) if end_ts else datetime.now(timezone.utc),
        "transcript": _as_text(_first(payload, TRANSCRIPT_KEYS)),
        "chat_messages": _as_text(payload.get("chatMessages")),
        "summary": _as_text(payload.get("summary")),
        "source": "extension",
        "meeting_software": str(payload.get("meetingSoftware") or "Google Meet"),
        "raw_payload": payload,
    }


class MeetingService:
    """Meeting persistence for one request."""

    def __init__(self, db: Session):
        self.db = db

    def capture(self, payload: Dict[str, Any], session_google_id: Optional[str] = None) -> Meeting:
        """Insert or update a meeting keyed by the extension's id."""
        values = normalize_capture(payload, session_google_id)

        meeting = self.db.get(Meeting, values["id"])
        if meeting is None:
            meeting = Meeting(**values)
            self.db.add(meeting)
            logger.info(f"Captured new meeting {meeting.id}")
        else:
            # An owned meeting keeps its owner; later posts only refresh content
            if meeting.user_google_id is not None:
                values.pop("user_google_id")
            for key, value in values.items():
                setattr(meeting, key, value)
            logger.info(f"Updated captured meeting {meeting.id}")

        self.db.commit()
        self.db.refresh(meeting)
        return meeting

    def list_for_user(self, google_id: str) -> List[Meeting]:
        stmt = (
            select(Meeting)
            .where(Meeting.user_google_id == google_id)
            .order_by(Meeting.meeting_timestamp.desc())
        )
        return list(self.db.execute(stmt).scalars())

    def delete_for_user(self, meeting_id: str, google_id: str) -> bool:
        """
        Delete one of the user's meetings.

        Returns:
            False if the meeting does not exist or belongs to someone else
        """
        meeting = self.db.get(Meeting, meeting_id)
        if meeting is None or meeting.user_google_id != google_id:
            return False

        self.db.delete(meeting)
        self.db.commit()
        logger.info(f"Deleted meeting {meeting_id}")
        return True
