"""Article store abstraction."""

from __future__ import annotations

from abc import ABC, abstractmethod

from article_dedup.models import Article


class ArticleStore(ABC):
    """Abstract base class for persisted article records.

    The duplicate finder only reads a snapshot through ``list_articles``;
    writes come from the scrape workflow. Implementations raise
    ``StoreError`` on I/O failure.
    """

    @abstractmethod
    async def list_articles(self) -> list[Article]:
        """Return every stored article, in insertion order."""
        ...

    @abstractmethod
    async def add_article(self, article: Article) -> None:
        """Store an article, replacing any record with the same URL."""
        ...

    @abstractmethod
    async def clear(self) -> int:
        """Delete all articles. Returns the number removed."""
        ...
