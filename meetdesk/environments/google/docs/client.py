"""
Google Docs API Client - Fetch Google Docs content.

API Reference:
==============
- Documents API: https://developers.google.com/docs/api/reference/rest/v1/documents

Usage Example:
==============
    client = GoogleDocsClient(session=authorized_session)
    doc = await client.get_document("1abc123...")
    print(doc["title"])
"""

import logging
import re
from typing import Any, Dict, Optional

from meetdesk.environments.base import APIError
from meetdesk.environments.google.auth.session import AuthorizedSession


logger = logging.getLogger("meetdesk.environments.google.docs")


ERROR_NOT_FOUND = "Document not found. Please check the document ID."
ERROR_NO_PERMISSION = "This Google account cannot access that document."
ERROR_MISSING_SCOPE = "Please reconnect Google to allow document access."

# Matches: https://docs.google.com/document/d/{docId}/edit
DOC_URL_PATTERN = re.compile(r"(?:https?://)?docs\.google\.com/document/d/([a-zA-Z0-9_-]+)")


def extract_document_id(value: str) -> Optional[str]:
    """
    Accept either a bare document ID or a Google Docs URL.

    Returns:
        The document ID, or None if the value is neither
    """
    value = value.strip()
    match = DOC_URL_PATTERN.search(value)
    if match:
        return match.group(1)
    if re.fullmatch(r"[a-zA-Z0-9_-]+", value):
        return value
    return None


class GoogleDocsClient:
    """Google Docs API client. Requires the documents.readonly scope."""

    BASE_URL = "https://docs.googleapis.com/v1"

    def __init__(self, session: AuthorizedSession):
        self.session = session

    async def get_document(self, document_id: str) -> Dict[str, Any]:
        """
        Fetch a Google Doc by its ID.

        Returns:
            The Docs API document resource

        Raises:
            APIError: With a readable message for 403/404
        """
        try:
            document = await self.session.get_json(f"{self.BASE_URL}/documents/{document_id}")
        except APIError as e:
            if e.status_code == 404:
                raise APIError(ERROR_NOT_FOUND, status_code=404, response=e.response) from e
            if e.status_code == 403:
                error_text = str(e.response or "").lower()
                message = ERROR_MISSING_SCOPE if "scope" in error_text or "insufficient" in error_text else ERROR_NO_PERMISSION
                raise APIError(message, status_code=403, response=e.response) from e
            raise

        logger.info(f"Fetched Google Doc {document_id}")
        return document
