"""
Tests for AI Providers - base dataclasses and the Gemini provider.

The google-genai client is mocked; no network calls are made.
"""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from meetdesk.ai.providers.base import AIResponse, ProviderType, TokenUsage
from meetdesk.ai.providers.gemini import GeminiProvider


class TestTokenUsage:
    """Tests for TokenUsage dataclass."""

    def test_auto_calculate_total(self):
        usage = TokenUsage(prompt_tokens=100, completion_tokens=50)

        assert usage.total_tokens == 150

    def test_total_overrides_calculation(self):
        usage = TokenUsage(prompt_tokens=100, completion_tokens=50, total_tokens=200)

        assert usage.total_tokens == 200


class TestAIResponse:

    def test_to_dict_truncates_long_content(self):
        response = AIResponse(content="x" * 150, provider=ProviderType.GEMINI, model="gemini-2.5-flash")

        data = response.to_dict()

        assert data["content"] == "x" * 100 + "..."
        assert data["provider"] == "gemini"
        assert data["success"] is True


def _genai_client(generate_content: AsyncMock) -> MagicMock:
    client = MagicMock()
    client.aio.models.generate_content = generate_content
    return client


class TestGeminiProvider:

    def test_without_api_key_is_not_configured(self):
        provider = GeminiProvider(api_key="")

        assert provider.is_configured is False

    @pytest.mark.asyncio
    async def test_without_api_key_returns_error_response(self):
        response = await GeminiProvider(api_key="").generate("hello")

        assert response.success is False
        assert response.error == "API key missing"

    @pytest.mark.asyncio
    async def test_generate_success(self):
        result = SimpleNamespace(
            text="A short summary.",
            usage_metadata=SimpleNamespace(prompt_token_count=12, candidates_token_count=4),
        )
        generate = AsyncMock(return_value=result)

        with patch("meetdesk.ai.providers.gemini.genai.Client", return_value=_genai_client(generate)):
            provider = GeminiProvider(api_key="test-key", model="gemini-2.5-flash")
            response = await provider.generate("Summarize this", max_tokens=256)

        assert response.success is True
        assert response.content == "A short summary."
        assert response.usage.total_tokens == 16
        kwargs = generate.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-flash"
        assert kwargs["contents"] == "Summarize this"
        assert kwargs["config"].max_output_tokens == 256

    @pytest.mark.asyncio
    async def test_sdk_error_is_captured(self):
        generate = AsyncMock(side_effect=RuntimeError("quota exceeded"))

        with patch("meetdesk.ai.providers.gemini.genai.Client", return_value=_genai_client(generate)):
            response = await GeminiProvider(api_key="test-key").generate("hi")

        assert response.success is False
        assert response.error == "quota exceeded"
        assert response.timed_out is False

    @pytest.mark.asyncio
    async def test_slow_answer_times_out(self):
        async def never_answers(**kwargs):
            await asyncio.sleep(10)

        with patch(
            "meetdesk.ai.providers.gemini.genai.Client",
            return_value=_genai_client(AsyncMock(side_effect=never_answers)),
        ):
            response = await GeminiProvider(api_key="test-key", timeout=0.01).generate("hi")

        assert response.success is False
        assert response.timed_out is True
