"""
Google Calendar Module - upcoming events and Google Meet history.
"""

from meetdesk.environments.google.calendar.client import GoogleCalendarClient
from meetdesk.environments.google.calendar.schemas import MeetEvent, is_google_meet_event

__all__ = [
    "GoogleCalendarClient",
    "MeetEvent",
    "is_google_meet_event",
]
