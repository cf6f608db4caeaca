"""Article store implementations: in-memory and JSON file."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from article_dedup.models import Article
from article_dedup.sources.base import ArticleStore
from article_dedup.sources.exceptions import StoreError

logger = logging.getLogger(__name__)

_ARTICLES = TypeAdapter(list[Article])


class InMemoryArticleStore(ArticleStore):
    """Process-local store, mostly for tests and one-off runs."""

    def __init__(self, articles: list[Article] | None = None) -> None:
        self._articles: dict[str, Article] = {a.url: a for a in articles or []}

    async def list_articles(self) -> list[Article]:
        return list(self._articles.values())

    async def add_article(self, article: Article) -> None:
        self._articles[article.url] = article

    async def clear(self) -> int:
        removed = len(self._articles)
        self._articles.clear()
        return removed


class JsonArticleStore(ArticleStore):
    """Articles persisted as a JSON array in a single file.

    Every write rewrites the file through a temporary sibling and
    ``os.replace``, so readers never see a half-written file.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    async def list_articles(self) -> list[Article]:
        async with self._lock:
            return await asyncio.to_thread(self._read)

    async def add_article(self, article: Article) -> None:
        async with self._lock:
            articles = await asyncio.to_thread(self._read)
            by_url = {a.url: a for a in articles}
            by_url[article.url] = article
            await asyncio.to_thread(self._write, list(by_url.values()))

    async def clear(self) -> int:
        async with self._lock:
            articles = await asyncio.to_thread(self._read)
            await asyncio.to_thread(self._write, [])
        logger.info("Cleared %d articles from %s", len(articles), self._path)
        return len(articles)

    def _read(self) -> list[Article]:
        if not self._path.exists():
            return []
        try:
            raw = self._path.read_text(encoding="utf-8")
            if not raw.strip():
                return []
            return _ARTICLES.validate_json(raw)
        except (OSError, ValidationError) as exc:
            raise StoreError(f"Cannot read article store {self._path}: {exc}") from exc

    def _write(self, articles: list[Article]) -> None:
        tmp = self._path.with_name(self._path.name + ".tmp")
        payload = [a.model_dump() for a in articles]
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(
                json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8"
            )
            os.replace(tmp, self._path)
        except OSError as exc:
            raise StoreError(f"Cannot write article store {self._path}: {exc}") from exc
