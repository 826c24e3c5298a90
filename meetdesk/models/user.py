"""
User model - one credential record per Google identity.

This is the Credential Store's table. A row holds the user's Google profile
together with the OAuth token pair used to call Google APIs on their behalf.

Refresh token stickiness:
=========================
Google only returns a refresh_token on some grants. Once a row has one, a
later grant without it must leave the stored value alone, otherwise the user
silently loses offline access. All writes go through
meetdesk.services.credential_store, which expresses that rule inside the SQL
statement (COALESCE) so it also holds under concurrent writes.

Example Usage:
    user = db.get(User, "110169484474386276334")
    user.access_token   # "ya29.xxx"
    user.refresh_token  # "1//0exxx" (or None if never granted)
"""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import JSON, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from meetdesk.db.base import Base


class User(Base):
    """
    SQLAlchemy ORM model for the 'users' table.

    The primary key is Google's stable subject id, which is also what the
    user_id session cookie carries.
    """

    __tablename__ = "users"

    # ---------------------------------------------------------------------------
    # IDENTITY
    # ---------------------------------------------------------------------------
    # google_id: Google's "id"/"sub" for the account, never changes
    google_id: Mapped[str] = mapped_column(String(255), primary_key=True)

    # Profile fields, refreshed on every login
    email: Mapped[Optional[str]] = mapped_column(String(255), index=True, nullable=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    picture: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # ---------------------------------------------------------------------------
    # TOKEN DATA
    # ---------------------------------------------------------------------------
    # access_token: Short-lived (~1 hour), overwritten on every refresh
    access_token: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # refresh_token: Long-lived, sticky once set (see module docstring)
    refresh_token: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # expires_at: When access_token expires, drives proactive refresh
    expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # scopes: Scopes granted at the last login
    scopes: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)

    # ---------------------------------------------------------------------------
    # TIMESTAMPS
    # ---------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    # last_login: Updated on every token acquisition or refresh
    last_login: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    # ---------------------------------------------------------------------------
    # HELPER METHODS
    # ---------------------------------------------------------------------------
    @property
    def is_connected(self) -> bool:
        """A record is usable for API calls once it holds an access token."""
        return bool(self.access_token)

    def __repr__(self) -> str:
        return f"<User(google_id='{self.google_id}', email='{self.email}')>"
