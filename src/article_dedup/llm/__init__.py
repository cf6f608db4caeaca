"""LLM provider abstraction layer."""

from article_dedup.llm.exceptions import (
    LLMAuthError,
    LLMError,
    LLMIncompleteError,
    LLMRateLimitError,
    LLMResponseError,
)
from article_dedup.llm.factory import create_provider

__all__ = [
    "create_provider",
    "LLMError",
    "LLMAuthError",
    "LLMIncompleteError",
    "LLMRateLimitError",
    "LLMResponseError",
]
