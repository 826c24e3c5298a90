"""
Summaries router - AI meeting summaries and export to Notion.

Endpoints:
==========
- POST /api/summarize                → Summarize a transcript with Gemini
- POST /api/meetings/save-to-notion  → Create a Notion page for a summary
"""

import logging

from fastapi import APIRouter, Depends

from meetdesk.core.errors import BadRequest, ServiceNotConfigured, UpstreamFailure, UpstreamTimeout
from meetdesk.deps import get_notion_exporter, get_summarizer
from meetdesk.environments.base import APIError, UpstreamTimeoutError
from meetdesk.schemas.meeting import (
    NotionExportRequest,
    NotionExportResponse,
    SummarizeRequest,
    SummarizeResponse,
)
from meetdesk.services.notion_export import NotionExporter
from meetdesk.services.summarizer import MeetingSummarizer


logger = logging.getLogger("meetdesk.routers.summaries")


router = APIRouter(prefix="/api", tags=["summaries"])


@router.post("/summarize", response_model=SummarizeResponse)
async def summarize_transcript(
    body: SummarizeRequest,
    summarizer: MeetingSummarizer = Depends(get_summarizer),
):
    summary = await summarizer.summarize(body.transcript)
    return SummarizeResponse(summary=summary)


@router.post(
    "/meetings/save-to-notion",
    response_model=NotionExportResponse,
    response_model_by_alias=True,
)
async def save_to_notion(
    body: NotionExportRequest,
    exporter: NotionExporter = Depends(get_notion_exporter),
):
    """
    Page title is "Meeting Summary: {title}", with Date and Participants
    properties and the summary followed by the transcript as content.
    """
    if not body.transcript or not body.summary:
        raise BadRequest("Transcript and summary are required")

    if not exporter.is_configured:
        logger.error("Notion export requested but NOTION_API_KEY/NOTION_DATABASE_ID are not set")
        raise ServiceNotConfigured("Notion is not configured")

    try:
        url = await exporter.create_summary_page(
            title=body.title,
            date=body.date,
            participants=body.participants,
            transcript=body.transcript,
            summary=body.summary,
        )
    except UpstreamTimeoutError as e:
        raise UpstreamTimeout("Timed out creating Notion page", error=str(e)) from e
    except APIError as e:
        raise UpstreamFailure("Error creating Notion page", error=str(e)) from e

    return NotionExportResponse(notion_url=url)
