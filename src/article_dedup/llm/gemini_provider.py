"""Google Gemini LLM provider."""

from __future__ import annotations

from typing import Any, ClassVar

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from article_dedup.config import LLMConfig
from article_dedup.llm.base import LLMProvider
from article_dedup.llm.exceptions import LLMAuthError, LLMError, LLMRateLimitError
from article_dedup.llm.json_utils import extract_json


class GeminiProvider(LLMProvider):
    """Google Gemini API provider."""

    _normal_finish_reasons: ClassVar[frozenset[str]] = frozenset(
        {"stop", "finish_reason_unspecified"}
    )

    def __init__(self, config: LLMConfig) -> None:
        kwargs: dict[str, Any] = {"api_key": config.api_key}
        if config.base_url:
            kwargs["http_options"] = types.HttpOptions(base_url=config.base_url)
        self._client = genai.Client(**kwargs)
        self._model = config.model
        self._temperature = config.temperature
        self._max_tokens = config.max_tokens

    def _error_map(self, exc: Exception) -> LLMError | None:
        if isinstance(exc, genai_errors.ClientError):
            if exc.code in (401, 403):
                return LLMAuthError(str(exc))
            if exc.code == 429:
                return LLMRateLimitError(str(exc))
            return LLMError(str(exc))
        if isinstance(exc, genai_errors.APIError):
            return LLMError(str(exc))
        return None

    async def _generate(
        self, user_message: str, config: types.GenerateContentConfig
    ) -> str:
        response = await self._client.aio.models.generate_content(
            model=self._model,
            contents=user_message,
            config=config,
        )
        if response.candidates:
            self._check_finish(response.candidates[0].finish_reason)
        return response.text or ""

    async def _call(self, system_prompt: str, user_message: str) -> str:
        return await self._generate(
            user_message,
            types.GenerateContentConfig(
                system_instruction=system_prompt,
                temperature=self._temperature,
                max_output_tokens=self._max_tokens,
            ),
        )

    async def _call_json(
        self,
        system_prompt: str,
        user_message: str,
        schema: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        config = types.GenerateContentConfig(
            system_instruction=system_prompt,
            temperature=self._temperature,
            max_output_tokens=self._max_tokens,
            response_mime_type="application/json",
        )
        if schema is not None:
            config.response_schema = schema
        text = await self._generate(user_message, config)
        return extract_json(text)
