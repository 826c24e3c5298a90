"""
Meeting summarization on top of an AIProvider.
"""

import logging

from meetdesk.ai.providers.base import AIProvider
from meetdesk.core.errors import BadRequest, ServiceNotConfigured, UpstreamFailure, UpstreamTimeout


logger = logging.getLogger("meetdesk.services.summarizer")


SUMMARY_PROMPT = "Summarize the following meeting transcript:\n\n{transcript}"


class MeetingSummarizer:
    """Turns a transcript into a short prose summary."""

    def __init__(self, provider: AIProvider, max_tokens: int = 1024):
        self.provider = provider
        self.max_tokens = max_tokens

    async def summarize(self, transcript: str) -> str:
        """
        Summarize a meeting transcript.

        Raises:
            BadRequest: Empty transcript
            ServiceNotConfigured: No AI credentials
            UpstreamTimeout: The provider did not answer in time
            UpstreamFailure: Any other provider error
        """
        if not transcript or not transcript.strip():
            raise BadRequest("Transcript is required")

        if not self.provider.is_configured:
            raise ServiceNotConfigured("Summarization is not configured")

        response = await self.provider.generate(
            SUMMARY_PROMPT.format(transcript=transcript),
            temperature=0.3,
            max_tokens=self.max_tokens,
        )

        if not response.success:
            logger.warning(f"Summary generation failed: {response.to_dict()}")
            if response.timed_out:
                raise UpstreamTimeout("Timed out generating summary", error=response.error)
            raise UpstreamFailure("Error generating summary", error=response.error)

        logger.info(
            f"Summarized transcript ({len(transcript)} chars) "
            f"in {response.latency_ms:.0f}ms, {response.usage.total_tokens} tokens"
        )
        return response.content.strip()
