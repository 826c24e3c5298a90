"""
Meeting schemas - responses for /api/meetings and the export endpoints.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MeetingOut(BaseModel):
    """
    A captured meeting as listed on the meetings page.

    The raw extension payload is not returned.
    """
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    meeting_timestamp: Optional[datetime]
    transcript: str
    chat_messages: str
    summary: str
    source: str
    meeting_software: str
    created_at: datetime
    updated_at: datetime


class MeetingCaptured(BaseModel):
    """Response of POST /api/meetings."""
    ok: bool = True
    id: str


class SummarizeRequest(BaseModel):
    transcript: str = ""


class SummarizeResponse(BaseModel):
    summary: str


class NotionExportRequest(BaseModel):
    """
    Body of POST /api/meetings/save-to-notion.

    Example:
    {
        "title": "Weekly sync",
        "date": "2026-10-19T10:00:00Z",
        "participants": 4,
        "transcript": "...",
        "summary": "..."
    }
    """
    title: str = "Meeting"
    date: Optional[datetime] = None
    participants: Optional[int] = Field(None, ge=0)
    transcript: str = ""
    summary: str = ""


class NotionExportResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    notion_url: Optional[str] = Field(None, alias="notionUrl")
