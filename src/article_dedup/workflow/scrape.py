"""Scrape workflow: sitemap -> article pages -> article store."""

from __future__ import annotations

import asyncio
import logging
import time

from article_dedup.config import AppConfig
from article_dedup.models import ScrapeFailure, ScrapeReport
from article_dedup.sources.base import ArticleStore
from article_dedup.sources.exceptions import ScrapeError, StoreError
from article_dedup.sources.scraper import ArticleScraper
from article_dedup.sources.sitemap import SitemapReader
from article_dedup.workflow.engine import ProgressReporter

logger = logging.getLogger(__name__)


async def scrape_and_store(
    urls: list[str],
    scraper: ArticleScraper,
    store: ArticleStore,
    *,
    stop: asyncio.Event | None = None,
    progress_reporter: ProgressReporter | None = None,
) -> ScrapeReport:
    """Replace the store's contents with freshly scraped articles.

    The store is cleared first and the clear is awaited before any page is
    fetched. A page that fails to scrape or store is recorded in
    ``failures`` and skipped; a failure to clear the store propagates.
    """
    removed = await store.clear()
    logger.info("Cleared %d stored articles before scraping", removed)

    report = ScrapeReport()
    t0 = time.perf_counter()
    for index, url in enumerate(urls):
        if stop is not None and stop.is_set():
            logger.info("Scraping stopped after %d of %d URLs", index, len(urls))
            report.stopped = True
            break

        try:
            article = await scraper.scrape(url)
            await store.add_article(article)
        except (ScrapeError, StoreError) as exc:
            logger.warning("Scraping failed for %s: %s", url, exc)
            report.failures.append(ScrapeFailure(url=url, error=str(exc)))
        else:
            report.stored_urls.append(url)

        if progress_reporter:
            try:
                progress_reporter(
                    "scraping",
                    {"url": url, "done": index + 1, "total": len(urls)},
                )
            except Exception:  # pragma: no cover
                logger.exception("Progress reporter failed")

    logger.info(
        "Scraped %d/%d articles in %.1fs (%d failures)",
        len(report.stored_urls), len(urls),
        time.perf_counter() - t0, len(report.failures),
    )
    return report


async def scrape_sitemap(
    config: AppConfig,
    store: ArticleStore | None = None,
    *,
    sitemap_url: str | None = None,
    stop: asyncio.Event | None = None,
    progress_reporter: ProgressReporter | None = None,
) -> ScrapeReport:
    """Read the configured sitemap and scrape every article it lists."""
    from article_dedup.sources.store import JsonArticleStore

    url = sitemap_url or config.scrape.sitemap_url
    if not url:
        raise ValueError("Sitemap URL required (set SITEMAP_URL)")

    reader = SitemapReader(
        path_marker=config.scrape.article_path_marker,
        timeout_s=config.scrape.timeout_s,
    )
    scraper = ArticleScraper(
        content_selector=config.scrape.content_selector,
        user_agent=config.scrape.user_agent,
        timeout_s=config.scrape.timeout_s,
    )
    try:
        urls = await reader.extract_article_urls(url)
        return await scrape_and_store(
            urls,
            scraper,
            store or JsonArticleStore(config.article_store_path),
            stop=stop,
            progress_reporter=progress_reporter,
        )
    finally:
        await reader.aclose()
        await scraper.aclose()
