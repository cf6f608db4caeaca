"""Utilities for extracting JSON from LLM response text."""

from __future__ import annotations

import json
import re
from typing import Any, Iterator

from article_dedup.llm.exceptions import LLMResponseError

_MARKDOWN_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?\s*```", re.DOTALL)
_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def extract_json(text: str) -> dict[str, Any]:
    """Extract a JSON object from LLM response text.

    Candidates are tried in order: the whole text, the body of a markdown
    fence, then the substring between the first ``{`` and the last ``}``.
    Raises ``LLMResponseError`` when none of them decodes to an object, or
    as soon as a candidate is a JSON array.
    """
    if not text or not text.strip():
        raise LLMResponseError("Empty LLM response")

    for candidate in _candidates(text):
        if candidate.startswith("["):
            raise LLMResponseError(
                f"Expected a JSON object, got an array: {text[:200]}"
            )
        try:
            result = json.loads(candidate)
        except (json.JSONDecodeError, ValueError):
            continue
        if isinstance(result, dict):
            return result

    raise LLMResponseError(
        f"Failed to extract JSON from LLM response: {text[:200]}"
    )


def snake_keys(data: dict[str, Any]) -> dict[str, Any]:
    """Return a shallow copy with camelCase keys converted to snake_case.

    Models are prompted for snake_case but some answer with ``isDuplicate``
    style keys anyway.
    """
    return {_CAMEL_RE.sub("_", str(k)).lower(): v for k, v in data.items()}


def _candidates(text: str) -> Iterator[str]:
    stripped = text.strip()
    yield stripped

    match = _MARKDOWN_FENCE_RE.search(text)
    if match:
        yield match.group(1).strip()

    first_brace = stripped.find("{")
    last_brace = stripped.rfind("}")
    if first_brace != -1 and last_brace > first_brace:
        yield stripped[first_brace : last_brace + 1]
