"""
Google Calendar API Client - Fetch calendar events.

API Reference:
==============
- Events API: https://developers.google.com/calendar/api/v3/reference/events

Usage Example:
==============
    from meetdesk.environments.google.calendar import GoogleCalendarClient

    client = GoogleCalendarClient(session=authorized_session)
    events = await client.list_upcoming_events(max_results=10)
    meetings = await client.list_meet_events()
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from meetdesk.environments.google.auth.session import AuthorizedSession
from meetdesk.environments.google.calendar.schemas import MeetEvent, is_google_meet_event


logger = logging.getLogger("meetdesk.environments.google.calendar")


def _rfc3339(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


class GoogleCalendarClient:
    """
    Google Calendar API client.

    Requires a session whose token carries the calendar.readonly scope.
    """

    BASE_URL = "https://www.googleapis.com/calendar/v3"

    # How far back the Meet history goes
    MEET_LOOKBACK = timedelta(days=30)

    def __init__(self, session: AuthorizedSession):
        self.session = session

    async def list_events(
        self,
        calendar_id: str = "primary",
        max_results: int = 10,
        time_min: Optional[datetime] = None,
        single_events: bool = True,
        order_by: str = "startTime",
    ) -> List[Dict[str, Any]]:
        """
        List events from a calendar, as raw API items.

        Args:
            calendar_id: Calendar identifier ("primary" for user's main calendar)
            max_results: Maximum number of events to return
            time_min: Start of time range (defaults to now)
            single_events: Expand recurring events into individual instances
            order_by: Sort order ("startTime" or "updated")
        """
        if time_min is None:
            time_min = datetime.now(timezone.utc)

        params = {
            "timeMin": _rfc3339(time_min),
            "maxResults": max_results,
            "singleEvents": str(single_events).lower(),
            "orderBy": order_by,
        }

        data = await self.session.get_json(
            f"{self.BASE_URL}/calendars/{calendar_id}/events",
            params=params,
        )
        items = data.get("items") or []

        logger.info(f"Fetched {len(items)} calendar events")
        return items

    async def list_upcoming_events(self, max_results: int = 10) -> List[Dict[str, Any]]:
        """Next events on the primary calendar, starting now."""
        return await self.list_events(max_results=max_results)

    async def list_meet_events(self, max_results: int = 50) -> List[MeetEvent]:
        """Primary-calendar events of the last 30 days that used Google Meet."""
        since = datetime.now(timezone.utc) - self.MEET_LOOKBACK
        events = await self.list_events(max_results=max_results, time_min=since)

        return [MeetEvent.from_api(event) for event in events if is_google_meet_event(event)]
