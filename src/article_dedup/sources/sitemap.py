"""Sitemap reader: sitemap URL -> article page URLs."""

from __future__ import annotations

import logging

import httpx
from bs4 import BeautifulSoup

from article_dedup.sources.exceptions import SitemapError

logger = logging.getLogger(__name__)


class SitemapReader:
    """Fetch an XML sitemap and keep the URLs that look like articles."""

    def __init__(
        self,
        path_marker: str = "/articles/",
        timeout_s: float = 20.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.path_marker = path_marker
        self.timeout_s = timeout_s
        self._client = client or httpx.AsyncClient(follow_redirects=True)

    async def extract_article_urls(self, sitemap_url: str) -> list[str]:
        try:
            response = await self._client.get(sitemap_url, timeout=self.timeout_s)
        except httpx.HTTPError as exc:
            raise SitemapError(f"Failed to fetch sitemap {sitemap_url}: {exc}") from exc

        if response.status_code != 200:
            raise SitemapError(
                f"Failed to fetch sitemap {sitemap_url}: HTTP {response.status_code}"
            )

        urls = self.parse(response.text)
        logger.info("Found %d article URLs in %s", len(urls), sitemap_url)
        return urls

    def parse(self, xml: str) -> list[str]:
        """Return ``<loc>`` values containing the path marker, first occurrence kept."""
        soup = BeautifulSoup(xml, "xml")
        seen: set[str] = set()
        urls: list[str] = []
        for loc in soup.find_all("loc"):
            url = loc.get_text(strip=True)
            if not url or self.path_marker not in url or url in seen:
                continue
            seen.add(url)
            urls.append(url)
        return urls

    async def aclose(self) -> None:
        await self._client.aclose()
