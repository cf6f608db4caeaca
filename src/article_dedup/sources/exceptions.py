"""Exceptions for article source and storage adapters."""


class ArticleSourceError(Exception):
    """Base exception for all article source errors."""


class SitemapError(ArticleSourceError):
    """The sitemap could not be fetched or parsed."""


class ScrapeError(ArticleSourceError):
    """A single article page could not be fetched or had no usable metadata."""


class StoreError(ArticleSourceError):
    """The article store could not be read or written."""
