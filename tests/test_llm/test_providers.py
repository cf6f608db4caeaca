"""Tests for LLM providers (mocked SDKs, no real API calls)."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from article_dedup.config import LLMConfig
from article_dedup.llm.exceptions import (
    LLMAuthError,
    LLMError,
    LLMIncompleteError,
    LLMRateLimitError,
)
from article_dedup.llm.factory import create_provider
from article_dedup.llm.openai_provider import OpenAIProvider
from article_dedup.llm.claude_provider import ClaudeProvider
from article_dedup.llm.gemini_provider import GeminiProvider


def _config(provider: str = "openai", **overrides: Any) -> LLMConfig:
    defaults = {
        "provider": provider,
        "api_key": "test-key",
        "model": "test-model",
        "temperature": 0.0,
        "max_tokens": 1024,
    }
    defaults.update(overrides)
    return LLMConfig(**defaults)


# ---------------------------------------------------------------
# Factory tests
# ---------------------------------------------------------------


class TestFactory:
    def test_creates_openai(self):
        assert isinstance(create_provider(_config("openai")), OpenAIProvider)

    def test_creates_claude(self):
        assert isinstance(create_provider(_config("claude")), ClaudeProvider)
        assert isinstance(create_provider(_config("anthropic")), ClaudeProvider)

    def test_creates_gemini(self):
        assert isinstance(create_provider(_config("gemini")), GeminiProvider)
        assert isinstance(create_provider(_config("Google")), GeminiProvider)

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown LLM provider"):
            create_provider(_config("xxx"))

    def test_missing_api_key(self):
        with pytest.raises(ValueError, match="API key required"):
            create_provider(_config("openai", api_key=""))

    def test_missing_model(self):
        with pytest.raises(ValueError, match="Model name required"):
            create_provider(_config("openai", model=""))


# ---------------------------------------------------------------
# OpenAI provider tests
# ---------------------------------------------------------------


def _openai_response(content: str, finish_reason: str = "stop") -> MagicMock:
    response = MagicMock()
    choice = MagicMock()
    choice.message.content = content
    choice.finish_reason = finish_reason
    response.choices = [choice]
    return response


class TestOpenAIProvider:
    @pytest.fixture()
    def provider(self):
        return OpenAIProvider(_config("openai"))

    @pytest.mark.asyncio
    async def test_complete(self, provider):
        provider._client.chat.completions.create = AsyncMock(
            return_value=_openai_response("Hello world")
        )
        assert await provider.complete("system", "user") == "Hello world"

    @pytest.mark.asyncio
    async def test_complete_json(self, provider):
        provider._client.chat.completions.create = AsyncMock(
            return_value=_openai_response('{"is_duplicate": true}')
        )
        result = await provider.complete_json("system", "user")
        assert result == {"is_duplicate": True}
        call_kwargs = provider._client.chat.completions.create.call_args.kwargs
        assert call_kwargs["response_format"] == {"type": "json_object"}

    @pytest.mark.asyncio
    async def test_truncated_response(self, provider):
        provider._client.chat.completions.create = AsyncMock(
            return_value=_openai_response('{"is_dup', finish_reason="length")
        )
        with pytest.raises(LLMIncompleteError) as info:
            await provider.complete_json("system", "user")
        assert info.value.finish_reason == "length"

    @pytest.mark.asyncio
    async def test_auth_error(self, provider):
        import openai

        provider._client.chat.completions.create = AsyncMock(
            side_effect=openai.AuthenticationError(
                message="bad key",
                response=MagicMock(status_code=401),
                body=None,
            )
        )
        with pytest.raises(LLMAuthError):
            await provider.complete("system", "user")

    @pytest.mark.asyncio
    async def test_rate_limit_error(self, provider):
        import openai

        provider._client.chat.completions.create = AsyncMock(
            side_effect=openai.RateLimitError(
                message="rate limited",
                response=MagicMock(status_code=429),
                body=None,
            )
        )
        with pytest.raises(LLMRateLimitError):
            await provider.complete("system", "user")

    @pytest.mark.asyncio
    async def test_unexpected_error_wrapped(self, provider):
        provider._client.chat.completions.create = AsyncMock(
            side_effect=RuntimeError("socket closed")
        )
        with pytest.raises(LLMError, match="socket closed"):
            await provider.complete("system", "user")


# ---------------------------------------------------------------
# Claude provider tests
# ---------------------------------------------------------------


def _claude_response(text: str, stop_reason: str = "end_turn") -> MagicMock:
    response = MagicMock()
    response.content = [MagicMock(text=text)]
    response.stop_reason = stop_reason
    return response


class TestClaudeProvider:
    @pytest.fixture()
    def provider(self):
        return ClaudeProvider(_config("claude"))

    @pytest.mark.asyncio
    async def test_complete(self, provider):
        provider._client.messages.create = AsyncMock(
            return_value=_claude_response("Hello from Claude")
        )
        result = await provider.complete("system prompt", "user msg")
        assert result == "Hello from Claude"

        call_kwargs = provider._client.messages.create.call_args.kwargs
        assert call_kwargs["system"] == "system prompt"
        assert call_kwargs["messages"] == [{"role": "user", "content": "user msg"}]

    @pytest.mark.asyncio
    async def test_complete_json(self, provider):
        provider._client.messages.create = AsyncMock(
            return_value=_claude_response('{"is_duplicate": false}')
        )
        result = await provider.complete_json("system", "user")
        assert result == {"is_duplicate": False}

        call_kwargs = provider._client.messages.create.call_args.kwargs
        assert "valid JSON only" in call_kwargs["system"]

    @pytest.mark.asyncio
    async def test_max_tokens_stop(self, provider):
        provider._client.messages.create = AsyncMock(
            return_value=_claude_response('{"is_', stop_reason="max_tokens")
        )
        with pytest.raises(LLMIncompleteError, match="max_tokens"):
            await provider.complete_json("system", "user")

    @pytest.mark.asyncio
    async def test_auth_error(self, provider):
        import anthropic

        provider._client.messages.create = AsyncMock(
            side_effect=anthropic.AuthenticationError(
                message="bad key",
                response=MagicMock(status_code=401),
                body=None,
            )
        )
        with pytest.raises(LLMAuthError):
            await provider.complete("system", "user")


# ---------------------------------------------------------------
# Gemini provider tests
# ---------------------------------------------------------------


def _gemini_response(text: str, finish_reason: Any = None) -> MagicMock:
    response = MagicMock()
    response.text = text
    if finish_reason is None:
        response.candidates = []
    else:
        response.candidates = [MagicMock(finish_reason=finish_reason)]
    return response


def _gemini_error(code: int, message: str) -> Exception:
    from google.genai import errors as genai_errors

    return genai_errors.ClientError(
        code, {"error": {"code": code, "message": message, "status": "ERROR"}}
    )


class TestGeminiProvider:
    @pytest.fixture()
    def provider(self):
        return GeminiProvider(_config("gemini"))

    @pytest.mark.asyncio
    async def test_complete(self, provider):
        from google.genai import types

        provider._client.aio.models.generate_content = AsyncMock(
            return_value=_gemini_response("Hello from Gemini", types.FinishReason.STOP)
        )
        assert await provider.complete("system", "user msg") == "Hello from Gemini"

    @pytest.mark.asyncio
    async def test_complete_json(self, provider):
        provider._client.aio.models.generate_content = AsyncMock(
            return_value=_gemini_response('{"is_duplicate": true}')
        )
        result = await provider.complete_json("system", "user")
        assert result == {"is_duplicate": True}

    @pytest.mark.asyncio
    async def test_complete_json_sends_schema(self, provider):
        provider._client.aio.models.generate_content = AsyncMock(
            return_value=_gemini_response('{"is_duplicate": false}')
        )
        schema = {
            "type": "object",
            "properties": {"is_duplicate": {"type": "boolean"}},
            "required": ["is_duplicate"],
        }
        await provider.complete_json("system", "user", schema=schema)
        config = provider._client.aio.models.generate_content.call_args.kwargs["config"]
        assert config.response_schema is not None
        assert config.response_mime_type == "application/json"

    @pytest.mark.asyncio
    async def test_safety_stop(self, provider):
        from google.genai import types

        provider._client.aio.models.generate_content = AsyncMock(
            return_value=_gemini_response("", types.FinishReason.SAFETY)
        )
        with pytest.raises(LLMIncompleteError, match="safety"):
            await provider.complete_json("system", "user")

    @pytest.mark.asyncio
    async def test_auth_error(self, provider):
        provider._client.aio.models.generate_content = AsyncMock(
            side_effect=_gemini_error(401, "unauthorized")
        )
        with pytest.raises(LLMAuthError):
            await provider.complete("system", "user")

    @pytest.mark.asyncio
    async def test_rate_limit_error(self, provider):
        provider._client.aio.models.generate_content = AsyncMock(
            side_effect=_gemini_error(429, "rate limited")
        )
        with pytest.raises(LLMRateLimitError):
            await provider.complete("system", "user")
