"""
Notion export - creates a page in a Notion database for a meeting summary.

Uses the public REST API directly:
    POST https://api.notion.com/v1/pages
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx

from meetdesk.core.config import settings
from meetdesk.environments.base import APIError, UpstreamTimeoutError


logger = logging.getLogger("meetdesk.services.notion")


# Notion rejects rich_text content longer than this.
MAX_TEXT_LENGTH = 2000


def _chunks(text: str, size: int = MAX_TEXT_LENGTH) -> List[str]:
    return [text[i:i + size] for i in range(0, len(text), size)] or [""]


def _heading(text: str) -> Dict[str, Any]:
    return {
        "object": "block",
        "type": "heading_2",
        "heading_2": {"rich_text": [{"type": "text", "text": {"content": text}}]},
    }


def _paragraphs(text: str) -> List[Dict[str, Any]]:
    return [
        {
            "object": "block",
            "type": "paragraph",
            "paragraph": {"rich_text": [{"type": "text", "text": {"content": chunk}}]},
        }
        for chunk in _chunks(text)
    ]


def build_page_payload(
    database_id: str,
    title: str,
    date: Optional[datetime],
    participants: Optional[int],
    transcript: str,
    summary: str,
) -> Dict[str, Any]:
    """Build the body of a Notion create-page request."""
    start = date or datetime.now(timezone.utc)
    if start.tzinfo is None:
        start = start.replace(tzinfo=timezone.utc)

    return {
        "parent": {"database_id": database_id},
        "properties": {
            "title": [{"text": {"content": f"Meeting Summary: {title}"}}],
            "Date": {"date": {"start": start.isoformat()}},
            "Participants": {"number": participants},
        },
        "children": [
            _heading("Summary"),
            *_paragraphs(summary),
            _heading("Transcript"),
            *_paragraphs(transcript),
        ],
    }


class NotionExporter:
    """
    Creates meeting summary pages.

    Args:
        api_key: Notion integration token
        database_id: Target database
        timeout: Request timeout in seconds
        transport: Optional httpx transport (tests pass a MockTransport)
    """

    PAGES_URL = "https://api.notion.com/v1/pages"

    def __init__(
        self,
        api_key: Optional[str] = None,
        database_id: Optional[str] = None,
        notion_version: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.NOTION_API_KEY
        self.database_id = database_id if database_id is not None else settings.NOTION_DATABASE_ID
        self.notion_version = notion_version or settings.NOTION_VERSION
        self.timeout = timeout or settings.UPSTREAM_TIMEOUT_SECONDS
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.database_id)

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Notion-Version": self.notion_version,
        }

    async def create_summary_page(
        self,
        title: str,
        date: Optional[datetime],
        participants: Optional[int],
        transcript: str,
        summary: str,
    ) -> Optional[str]:
        """
        Create the page and return its URL.

        Raises:
            UpstreamTimeoutError: Notion did not answer in time
            APIError: Notion rejected the request or was unreachable
        """
        payload = build_page_payload(
            self.database_id, title, date, participants, transcript, summary
        )

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.PAGES_URL, headers=self._headers(), json=payload)
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(f"Notion request timed out: {e}") from e
        except httpx.RequestError as e:
            raise APIError(f"Notion request failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"Notion page creation failed: {response.status_code} {response.text}")
            raise APIError(
                f"Notion returned {response.status_code}",
                status_code=response.status_code,
                response=response.text,
            )

        url = response.json().get("url")
        logger.info(f"Created Notion page for '{title}': {url}")
        return url
