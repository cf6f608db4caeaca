"""OpenAI LLM provider (also supports OpenAI-compatible APIs)."""

from __future__ import annotations

from typing import Any

import openai

from article_dedup.config import LLMConfig
from article_dedup.llm.base import LLMProvider
from article_dedup.llm.exceptions import LLMAuthError, LLMError, LLMRateLimitError
from article_dedup.llm.json_utils import extract_json


class OpenAIProvider(LLMProvider):
    """OpenAI API provider. Also works with OpenAI-compatible endpoints."""

    def __init__(self, config: LLMConfig) -> None:
        self._client = openai.AsyncOpenAI(
            api_key=config.api_key,
            base_url=config.base_url,
        )
        self._model = config.model
        self._temperature = config.temperature
        self._max_tokens = config.max_tokens

    def _error_map(self, exc: Exception) -> LLMError | None:
        if isinstance(exc, openai.AuthenticationError):
            return LLMAuthError(str(exc))
        if isinstance(exc, openai.RateLimitError):
            return LLMRateLimitError(str(exc))
        if isinstance(exc, openai.APIError):
            return LLMError(str(exc))
        return None

    async def _create(self, system_prompt: str, user_message: str, **extra: Any) -> str:
        response = await self._client.chat.completions.create(
            model=self._model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
            temperature=self._temperature,
            max_tokens=self._max_tokens,
            **extra,
        )
        choice = response.choices[0]
        self._check_finish(choice.finish_reason)
        return choice.message.content or ""

    async def _call(self, system_prompt: str, user_message: str) -> str:
        return await self._create(system_prompt, user_message)

    async def _call_json(
        self,
        system_prompt: str,
        user_message: str,
        schema: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        text = await self._create(
            system_prompt,
            user_message,
            response_format={"type": "json_object"},
        )
        return extract_json(text)
