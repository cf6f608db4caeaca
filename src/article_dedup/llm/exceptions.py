"""LLM provider exceptions."""

from __future__ import annotations


class LLMError(Exception):
    """Base exception for LLM provider errors."""


class LLMAuthError(LLMError):
    """Authentication or authorization failure."""


class LLMRateLimitError(LLMError):
    """Rate limit exceeded."""


class LLMResponseError(LLMError):
    """Failed to parse or extract response from LLM output."""


class LLMIncompleteError(LLMError):
    """The model stopped generating for a reason other than normal completion."""

    def __init__(self, finish_reason: str, message: str | None = None) -> None:
        self.finish_reason = finish_reason
        super().__init__(
            message or f"Generation stopped unexpectedly: {finish_reason}"
        )
