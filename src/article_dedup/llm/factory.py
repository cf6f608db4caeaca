"""LLM provider factory."""

from __future__ import annotations

from article_dedup.config import LLMConfig
from article_dedup.llm.base import LLMProvider


def create_provider(config: LLMConfig) -> LLMProvider:
    """Create the oracle's LLM provider from configuration.

    ``anthropic`` and ``google`` are accepted as aliases of ``claude`` and
    ``gemini``.
    """
    if not config.api_key:
        raise ValueError(
            f"API key required for provider '{config.provider}'"
        )
    if not config.model:
        raise ValueError(
            f"Model name required for provider '{config.provider}'"
        )

    match config.provider.strip().lower():
        case "openai":
            from article_dedup.llm.openai_provider import OpenAIProvider

            return OpenAIProvider(config)
        case "claude" | "anthropic":
            from article_dedup.llm.claude_provider import ClaudeProvider

            return ClaudeProvider(config)
        case "gemini" | "google":
            from article_dedup.llm.gemini_provider import GeminiProvider

            return GeminiProvider(config)
        case _:
            raise ValueError(f"Unknown LLM provider: {config.provider}")
