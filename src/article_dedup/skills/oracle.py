"""Oracle adapter: article pair (or primary + candidates) -> duplicate verdict."""

from __future__ import annotations

import json
import logging
import time
from typing import Any

from pydantic import BaseModel, ValidationError

from article_dedup.llm.base import LLMProvider
from article_dedup.llm.exceptions import LLMError, LLMIncompleteError
from article_dedup.llm.json_utils import snake_keys
from article_dedup.models import (
    Article,
    BatchJudgment,
    ComparisonCriterion,
    DuplicateMatch,
    Judgment,
)
from article_dedup.prompts.comparison import (
    ONE_VS_REST_SYSTEM,
    PAIR_CONTENT_SYSTEM,
    PAIR_METADATA_SYSTEM,
)

logger = logging.getLogger(__name__)

_NO_OUTPUT = "No output from AI."
_FAILED = "Comparison failed"


class OracleError(Exception):
    """A batched oracle call failed; raised only by ``compare_many``."""


class _PairVerdict(BaseModel):
    is_duplicate: bool
    reason: str | None = None


class _ContentVerdict(BaseModel):
    similarity_score: float
    reason: str | None = None


class DuplicateOracle:
    """Ask the LLM whether articles are duplicates.

    ``compare`` never raises: every failure becomes a negative judgment whose
    ``error`` carries the diagnostic. ``compare_many`` raises ``OracleError``
    instead, since a partial primary-vs-rest answer cannot be merged safely.
    """

    def __init__(
        self,
        llm: LLMProvider,
        *,
        criterion: ComparisonCriterion = ComparisonCriterion.METADATA,
        similarity_threshold: float = 0.8,
        max_content_chars: int = 4000,
    ) -> None:
        self._llm = llm
        self._criterion = criterion
        self._similarity_threshold = similarity_threshold
        self._max_content_chars = max(1, max_content_chars)
        self.call_count = 0

    @property
    def criterion(self) -> ComparisonCriterion:
        return self._criterion

    # ------------------------------------------------------------------
    # Pair form
    # ------------------------------------------------------------------

    async def compare(self, a: Article, b: Article) -> Judgment:
        self.call_count += 1
        t0 = time.perf_counter()
        try:
            if self._criterion == ComparisonCriterion.CONTENT:
                verdict = await self._compare_content(a, b)
            else:
                verdict = await self._compare_metadata(a, b)
        except LLMIncompleteError as exc:
            logger.warning(
                "Comparison of %s and %s stopped for an unexpected reason: %s",
                a.url, b.url, exc.finish_reason,
            )
            return self._failed(a, b, f"Analysis stopped: {exc.finish_reason}")
        except LLMError as exc:
            logger.warning("Error comparing %s and %s: %s", a.url, b.url, exc)
            return self._failed(a, b, str(exc) or _FAILED)
        except ValidationError as exc:
            logger.warning(
                "Malformed verdict for %s and %s: %s",
                a.url, b.url, exc.errors()[0].get("msg", ""),
            )
            return self._failed(a, b, _NO_OUTPUT)
        except Exception as exc:  # pragma: no cover
            logger.exception("Oracle crashed comparing %s and %s", a.url, b.url)
            return self._failed(a, b, str(exc) or _FAILED)

        logger.debug(
            "Compared %s and %s in %.1fs: duplicate=%s",
            a.url, b.url, time.perf_counter() - t0, verdict.is_duplicate,
        )
        return Judgment(
            url_a=a.url,
            url_b=b.url,
            is_duplicate=verdict.is_duplicate,
            reason=verdict.reason or None,
        )

    async def _compare_metadata(self, a: Article, b: Article) -> _PairVerdict:
        user_msg = "\n".join(
            self._format_metadata("Article 1", a)
            + ["---"]
            + self._format_metadata("Article 2", b)
            + ["", "Are these two articles duplicates based on the strict criteria?"]
        )
        result = await self._llm.complete_json(
            PAIR_METADATA_SYSTEM, user_msg, schema=_PairVerdict.model_json_schema()
        )
        return _PairVerdict.model_validate(snake_keys(result))

    async def _compare_content(self, a: Article, b: Article) -> _PairVerdict:
        limit = self._max_content_chars
        user_msg = "\n".join([
            "Article 1:",
            a.content[:limit],
            "",
            "Article 2:",
            b.content[:limit],
        ])
        result = await self._llm.complete_json(
            PAIR_CONTENT_SYSTEM, user_msg, schema=_ContentVerdict.model_json_schema()
        )
        similarity = _ContentVerdict.model_validate(snake_keys(result))
        score = max(0.0, min(1.0, similarity.similarity_score))
        reason = similarity.reason or ""
        is_duplicate = score >= self._similarity_threshold
        if is_duplicate:
            prefix = f"Content similarity {score:.2f}"
            reason = f"{prefix}: {reason}" if reason else prefix
        return _PairVerdict(is_duplicate=is_duplicate, reason=reason)

    @staticmethod
    def _format_metadata(label: str, article: Article) -> list[str]:
        return [
            f"{label}:",
            f"- URL: {article.url}",
            f"- H1: {article.h1}",
            f"- Meta Title: {article.meta_title}",
            f"- Meta Description: {article.meta_description}",
        ]

    @staticmethod
    def _failed(a: Article, b: Article, reason: str) -> Judgment:
        return Judgment(
            url_a=a.url,
            url_b=b.url,
            is_duplicate=False,
            reason=reason,
            error=reason,
        )

    # ------------------------------------------------------------------
    # Batched (one-vs-rest) form
    # ------------------------------------------------------------------

    async def compare_many(
        self, primary: Article, others: list[Article]
    ) -> BatchJudgment:
        if not others:
            return BatchJudgment()

        self.call_count += 1
        user_msg = "\n".join([
            "Primary article:",
            json.dumps(primary.metadata(), ensure_ascii=False),
            "",
            "Other articles:",
            json.dumps(
                [{"url": o.url, "meta_title": o.display_title} for o in others],
                ensure_ascii=False,
            ),
        ])

        t0 = time.perf_counter()
        try:
            result = await self._llm.complete_json(
                ONE_VS_REST_SYSTEM, user_msg, schema=BatchJudgment.model_json_schema()
            )
        except LLMIncompleteError as exc:
            raise OracleError(
                f"Analysis of {primary.url} stopped: {exc.finish_reason}"
            ) from exc
        except LLMError as exc:
            raise OracleError(
                f"Comparison of {primary.url} against {len(others)} articles failed: {exc}"
            ) from exc

        batch = self._parse_batch(primary, result)
        logger.info(
            "Compared %s against %d articles in %.1fs (%d duplicates)",
            primary.url, len(others), time.perf_counter() - t0, len(batch.duplicates),
        )
        return batch

    @staticmethod
    def _parse_batch(primary: Article, result: dict[str, Any]) -> BatchJudgment:
        data = snake_keys(result)
        if "duplicates" not in data and "is_duplicate" not in data:
            raise OracleError(f"Malformed verdict for {primary.url}: {_NO_OUTPUT}")

        raw = data.get("duplicates") or []
        if not isinstance(raw, list):
            raise OracleError(f"Malformed duplicates list for {primary.url}")

        matches: list[DuplicateMatch] = []
        for item in raw:
            if isinstance(item, str):
                item = {"url": item}
            if not isinstance(item, dict) or not item.get("url"):
                continue
            matches.append(
                DuplicateMatch(url=str(item["url"]), reason=str(item.get("reason") or ""))
            )
        return BatchJudgment(is_duplicate=bool(matches), duplicates=matches)
