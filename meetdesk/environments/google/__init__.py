"""
Google Environment Module - Google Workspace Integration

Architecture:
=============
google/
├── __init__.py           # Module exports
├── auth/                 # Shared OAuth authentication
│   ├── client.py         # Google OAuth implementation
│   ├── schemas.py        # Scopes, token and profile shapes
│   └── session.py        # AuthorizedSession (token rotation + events)
├── calendar/             # Calendar events and Meet history
├── gmail/                # Recent emails as reports
└── docs/                 # Google Docs documents

Key Design Decisions:
=====================
1. Shared Auth: All Google services use the same OAuth credentials
2. One Session: Services never hold tokens, they call through AuthorizedSession
3. Rotation Events: Whoever builds the session decides how rotated tokens are saved

Usage:
======
    from meetdesk.environments.google import AuthorizedSession, GoogleCalendarClient

    session = AuthorizedSession(tokens=tokens)
    session.on_tokens(persister.for_user(google_id))
    events = await GoogleCalendarClient(session).list_upcoming_events()
"""

from meetdesk.environments.google.auth import (
    DEFAULT_SCOPES,
    AuthorizedSession,
    GoogleAuthClient,
    build_redirect_uri,
)
from meetdesk.environments.google.calendar import GoogleCalendarClient, MeetEvent
from meetdesk.environments.google.docs import GoogleDocsClient
from meetdesk.environments.google.gmail import GmailClient, GmailReport

__all__ = [
    "AuthorizedSession",
    "GoogleAuthClient",
    "GoogleCalendarClient",
    "GoogleDocsClient",
    "GmailClient",
    "GmailReport",
    "MeetEvent",
    "DEFAULT_SCOPES",
    "build_redirect_uri",
]
