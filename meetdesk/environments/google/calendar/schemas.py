"""
Google Calendar Schemas - shapes returned by the Meet events endpoint.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MeetSpace(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    meeting_code: Optional[str] = Field(None, alias="meetingCode")


class MeetEvent(BaseModel):
    """
    A calendar event that has a Google Meet conference attached.

    Serialized with camelCase aliases for the frontend:
    {
        "id": "abc123",
        "name": "Weekly sync",
        "startTime": "2026-10-19T10:00:00Z",
        "meetingCode": "abc-defg-hij",
        "meetingUrl": "https://meet.google.com/abc-defg-hij",
        ...
    }
    """
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    name: str = "Untitled Meeting"
    start_time: Optional[str] = Field(None, alias="startTime")
    end_time: Optional[str] = Field(None, alias="endTime")
    meeting_code: Optional[str] = Field(None, alias="meetingCode")
    meeting_url: Optional[str] = Field(None, alias="meetingUrl")
    attendees: List[Dict[str, Any]] = Field(default_factory=list)
    description: str = ""
    space: MeetSpace = Field(default_factory=MeetSpace)

    @classmethod
    def from_api(cls, event: Dict[str, Any]) -> "MeetEvent":
        """Build from a raw Calendar API event item."""
        conference = event.get("conferenceData") or {}
        start = event.get("start") or {}
        end = event.get("end") or {}

        video_entry = next(
            (
                entry for entry in conference.get("entryPoints") or []
                if entry and entry.get("entryPointType") == "video"
            ),
            {},
        )
        meeting_code = conference.get("conferenceId")

        return cls(
            id=event.get("id"),
            name=event.get("summary") or "Untitled Meeting",
            start_time=start.get("dateTime") or start.get("date"),
            end_time=end.get("dateTime") or end.get("date"),
            meeting_code=meeting_code,
            meeting_url=event.get("hangoutLink") or video_entry.get("uri"),
            attendees=event.get("attendees") or [],
            description=event.get("description") or "",
            space=MeetSpace(meeting_code=meeting_code),
        )


def is_google_meet_event(event: Dict[str, Any]) -> bool:
    """True if the event's conference solution is Google Meet."""
    conference = event.get("conferenceData") or {}
    solution = conference.get("conferenceSolution") or {}
    return solution.get("name") == "Google Meet"
