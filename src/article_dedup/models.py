"""Core data models for the article dedup module.

All Pydantic models are defined here as the single source of truth.
Every other module imports from this file.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class ScheduleStrategy(str, Enum):
    ALL_PAIRS = "all_pairs"
    BATCHED = "batched"
    ONE_VS_REST = "one_vs_rest"
    SINGLE_STEP = "single_step"


class ComparisonCriterion(str, Enum):
    METADATA = "metadata"
    CONTENT = "content"


# ---------------------------------------------------------------------------
# Articles
# ---------------------------------------------------------------------------

class Article(BaseModel):
    url: str
    h1: str = ""
    meta_title: str = ""
    meta_description: str = ""
    content: str = ""

    @property
    def display_title(self) -> str:
        return self.meta_title or self.h1 or self.url

    def metadata(self) -> dict[str, Any]:
        """Lightweight record sent to the oracle (no page content)."""
        return {
            "url": self.url,
            "h1": self.h1,
            "meta_title": self.meta_title,
            "meta_description": self.meta_description,
        }


# ---------------------------------------------------------------------------
# Oracle verdicts
# ---------------------------------------------------------------------------

class Judgment(BaseModel):
    url_a: str
    url_b: str
    is_duplicate: bool
    reason: str | None = None
    error: str | None = None

    @property
    def key(self) -> tuple[str, str]:
        """Order-free identity of the pair; (A, B) and (B, A) share it."""
        a, b = sorted((self.url_a, self.url_b))
        return (a, b)

    @property
    def failed(self) -> bool:
        return self.error is not None


class DuplicateMatch(BaseModel):
    url: str
    reason: str = ""


class BatchJudgment(BaseModel):
    is_duplicate: bool = False
    duplicates: list[DuplicateMatch] = []


class PairFailure(BaseModel):
    url_a: str
    url_b: str
    reason: str


# ---------------------------------------------------------------------------
# Consolidation
# ---------------------------------------------------------------------------

class Group(BaseModel):
    id: str
    members: frozenset[str]
    reason: str = ""


class ScheduleCursor(BaseModel):
    """Resumable position in pair enumeration.

    Points at the next pair to evaluate, ``(primary_index,
    primary_index + offset)``. Transitions return new cursors.
    """

    primary_index: int = Field(default=0, ge=0)
    offset: int = Field(default=1, ge=1)

    @staticmethod
    def total_pairs(n: int) -> int:
        return n * (n - 1) // 2 if n > 1 else 0

    def is_done(self, n: int) -> bool:
        return self.primary_index >= n - 1

    def normalized(self, n: int) -> ScheduleCursor:
        """Roll an out-of-range offset over to the next primary."""
        if not self.is_done(n) and self.primary_index + self.offset >= n:
            return self.next_primary()
        return self

    def current_pair(self) -> tuple[int, int]:
        return (self.primary_index, self.primary_index + self.offset)

    def advanced(self, n: int) -> ScheduleCursor:
        """Cursor of the pair following the current one."""
        index = self.primary_index
        offset = self.offset + 1
        if index + offset >= n:
            index += 1
            offset = 1
        return ScheduleCursor(primary_index=index, offset=offset)

    def next_primary(self) -> ScheduleCursor:
        return ScheduleCursor(primary_index=self.primary_index + 1, offset=1)

    def pairs_completed(self, n: int) -> int:
        if n < 2:
            return 0
        if self.is_done(n):
            return self.total_pairs(n)
        i = self.primary_index
        done_before = i * (n - 1) - i * (i - 1) // 2
        return min(done_before + self.offset - 1, self.total_pairs(n))


# ---------------------------------------------------------------------------
# Final Output
# ---------------------------------------------------------------------------

class ArticleRef(BaseModel):
    title: str
    url: str


class DuplicateGroup(BaseModel):
    reason: str
    articles: list[ArticleRef]


class DuplicateReport(BaseModel):
    duplicate_groups: list[DuplicateGroup] = []


# ---------------------------------------------------------------------------
# Scraping
# ---------------------------------------------------------------------------

class ScrapeFailure(BaseModel):
    url: str
    error: str


class ScrapeReport(BaseModel):
    stored_urls: list[str] = []
    failures: list[ScrapeFailure] = []
    stopped: bool = False
