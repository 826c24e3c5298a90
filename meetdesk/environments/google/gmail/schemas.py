"""
Gmail Schemas - report entries shown on the reports page.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class GmailReport(BaseModel):
    """
    One recent email, flattened for the reports table.

    Example:
    {
        "id": "18c2f...",
        "source": "Gmail",
        "title": "Q3 planning notes",
        "tags": ["Email"],
        "owner": "Jane Doe",
        "date": "Mon, 19 Oct 2026 09:12:00 +0000",
        "snippet": "Attached are the notes from..."
    }
    """
    id: Optional[str] = None
    source: str = "Gmail"
    title: str = "No Subject"
    tags: List[str] = Field(default_factory=lambda: ["Email"])
    owner: str = "Unknown Sender"
    date: str
    snippet: str = ""
