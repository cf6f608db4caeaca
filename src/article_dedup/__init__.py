"""article-dedup: find near-duplicate articles on a website with an LLM oracle."""

from __future__ import annotations

from typing import TYPE_CHECKING

from article_dedup.export import export_json, export_markdown
from article_dedup.models import (
    Article,
    ArticleRef,
    DuplicateGroup,
    DuplicateReport,
    Judgment,
    ScheduleCursor,
    ScheduleStrategy,
)

if TYPE_CHECKING:
    from article_dedup.config import AppConfig
    from article_dedup.sources.base import ArticleStore


async def find_duplicates(
    config: AppConfig | None = None,
    store: ArticleStore | None = None,
) -> DuplicateReport:
    """One-line convenience: analyze every stored article in one pass.

    Args:
        config: Optional AppConfig. If None, loads from environment.
        store: Optional article store. Defaults to the JSON store at
            ``config.article_store_path``.
    """
    from article_dedup.config import load_config
    from article_dedup.workflow import DuplicateFinder

    cfg = config or load_config()
    finder = DuplicateFinder.from_config(cfg, store=store)
    return await finder.find_duplicates()


__all__ = [
    "Article",
    "ArticleRef",
    "DuplicateGroup",
    "DuplicateReport",
    "Judgment",
    "ScheduleCursor",
    "ScheduleStrategy",
    "find_duplicates",
    "export_json",
    "export_markdown",
]
