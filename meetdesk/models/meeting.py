"""
Meeting model - meetings captured by the browser extension.

The extension posts one payload when a meeting ends. We keep a few
normalized columns for listing and the raw payload for everything else.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import JSON, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from meetdesk.db.base import Base


class Meeting(Base):
    """SQLAlchemy ORM model for the 'meetings' table."""

    __tablename__ = "meetings"

    # id: The extension's own meeting id, or a generated UUID string
    id: Mapped[str] = mapped_column(String(255), primary_key=True)

    # Owner, no foreign key: the extension may post before the user logs in
    user_google_id: Mapped[Optional[str]] = mapped_column(
        String(255), index=True, nullable=True
    )

    title: Mapped[str] = mapped_column(String(500), default="Meeting")
    meeting_timestamp: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    transcript: Mapped[str] = mapped_column(Text, default="")
    chat_messages: Mapped[str] = mapped_column(Text, default="")
    summary: Mapped[str] = mapped_column(Text, default="")
    source: Mapped[str] = mapped_column(String(50), default="extension")
    meeting_software: Mapped[str] = mapped_column(String(100), default="Google Meet")
    raw_payload: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<Meeting(id='{self.id}', title='{self.title}')>"
