"""
Gemini Provider - Google's GenAI SDK.
"""

import asyncio
import time
import logging
from typing import Optional

from google import genai
from google.genai import types

from meetdesk.core.config import settings
from meetdesk.ai.providers.base import (
    AIProvider,
    AIResponse,
    ProviderType,
    TokenUsage,
)

logger = logging.getLogger("meetdesk.ai.gemini")


class GeminiProvider(AIProvider):
    provider_type = ProviderType.GEMINI

    def __init__(
        self,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.model = model or settings.GEMINI_MODEL
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.timeout = timeout or settings.UPSTREAM_TIMEOUT_SECONDS

        if self.api_key:
            self._client = genai.Client(api_key=self.api_key)
            logger.info(f"Gemini provider initialized with model: {self.model}")
        else:
            self._client = None
            logger.warning("Gemini API key not configured")

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 1024,
        **kwargs
    ) -> AIResponse:
        start_time = time.time()

        if not self._client:
            return self._error("API key missing", start_time)

        try:
            config = types.GenerateContentConfig(
                temperature=temperature,
                max_output_tokens=max_tokens,
                system_instruction=system_prompt,
            )

            response = await asyncio.wait_for(
                self._client.aio.models.generate_content(
                    model=self.model,
                    contents=prompt,
                    config=config,
                ),
                timeout=self.timeout,
            )

            return AIResponse(
                content=response.text or "",
                provider=self.provider_type,
                model=self.model,
                usage=self._extract_usage(response),
                latency_ms=self._measure_latency(start_time),
                success=True,
            )

        except asyncio.TimeoutError:
            return self._error(
                f"Gemini did not answer within {self.timeout:.0f}s", start_time, timed_out=True
            )
        except Exception as e:
            logger.error(f"Gemini generation failed: {e}")
            return self._error(str(e), start_time)

    def _extract_usage(self, response) -> TokenUsage:
        usage = response.usage_metadata
        prompt_t = (usage.prompt_token_count or 0) if usage else 0
        comp_t = (usage.candidates_token_count or 0) if usage else 0
        return TokenUsage(prompt_tokens=prompt_t, completion_tokens=comp_t)

    def _error(self, msg: str, start_time: float, timed_out: bool = False) -> AIResponse:
        return self._create_error_response(
            error=msg,
            model=self.model,
            latency_ms=self._measure_latency(start_time),
            timed_out=timed_out,
        )
