"""
Gmail API Client - recent messages as "reports".

The reports page lists the most recent emails next to meeting summaries.
Only message metadata (Subject, Date, From) and the snippet are read.

API Reference:
==============
- Messages API: https://developers.google.com/gmail/api/reference/rest/v1/users.messages
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from meetdesk.environments.google.auth.session import AuthorizedSession
from meetdesk.environments.google.gmail.schemas import GmailReport


logger = logging.getLogger("meetdesk.environments.google.gmail")


def _header(message: Dict[str, Any], name: str) -> str | None:
    headers = (message.get("payload") or {}).get("headers") or []
    for header in headers:
        if header.get("name") == name:
            return header.get("value")
    return None


def sender_display_name(from_header: str) -> str:
    """
    "Jane Doe <jane@example.com>" → "Jane Doe"; a bare address is kept as is.
    """
    if "<" in from_header:
        return from_header.split("<")[0].strip().strip('"')
    return from_header


class GmailClient:
    """Gmail API client. Requires the gmail.readonly scope."""

    BASE_URL = "https://gmail.googleapis.com/gmail/v1/users/me"

    def __init__(self, session: AuthorizedSession):
        self.session = session

    async def get_message_metadata(self, message_id: str) -> Dict[str, Any]:
        return await self.session.get_json(
            f"{self.BASE_URL}/messages/{message_id}",
            params=[
                ("format", "metadata"),
                ("metadataHeaders", "Subject"),
                ("metadataHeaders", "Date"),
                ("metadataHeaders", "From"),
            ],
        )

    async def list_reports(self, max_results: int = 10) -> List[GmailReport]:
        """
        Fetch the most recent messages as reports.

        Args:
            max_results: How many messages to list

        Returns:
            One GmailReport per message, newest first
        """
        listing = await self.session.get_json(
            f"{self.BASE_URL}/messages",
            params={"maxResults": max_results},
        )
        message_refs = listing.get("messages") or []
        if not message_refs:
            return []

        # The first call may have rotated the token, so these all share it
        messages = await asyncio.gather(
            *(self.get_message_metadata(ref["id"]) for ref in message_refs)
        )

        reports = []
        for message in messages:
            reports.append(
                GmailReport(
                    id=message.get("id"),
                    title=_header(message, "Subject") or "No Subject",
                    owner=sender_display_name(_header(message, "From") or "Unknown Sender"),
                    date=_header(message, "Date") or datetime.now(timezone.utc).isoformat(),
                    snippet=message.get("snippet") or "",
                )
            )

        logger.info(f"Fetched {len(reports)} Gmail reports")
        return reports
