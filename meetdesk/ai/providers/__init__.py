"""
AI Providers Module - LLM clients behind a common interface.

    response = await provider.generate(prompt, **kwargs)
"""

from meetdesk.ai.providers.base import AIProvider, AIResponse, ProviderType, TokenUsage
from meetdesk.ai.providers.gemini import GeminiProvider

__all__ = [
    "AIProvider",
    "AIResponse",
    "ProviderType",
    "TokenUsage",
    "GeminiProvider",
]
