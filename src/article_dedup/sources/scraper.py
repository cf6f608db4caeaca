"""Article scraper: page URL -> Article (H1, meta title, description, body)."""

from __future__ import annotations

import httpx
from bs4 import BeautifulSoup

from article_dedup.models import Article
from article_dedup.sources.exceptions import ScrapeError

_DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; article-dedup)"


class ArticleScraper:
    """Fetch article pages and extract the fields the oracle compares."""

    def __init__(
        self,
        content_selector: str = ".prose",
        user_agent: str = _DEFAULT_USER_AGENT,
        timeout_s: float = 20.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.content_selector = content_selector
        self.timeout_s = timeout_s
        self._headers = {"User-Agent": user_agent}
        self._client = client or httpx.AsyncClient(follow_redirects=True)

    async def scrape(self, url: str) -> Article:
        try:
            response = await self._client.get(
                url, headers=self._headers, timeout=self.timeout_s
            )
        except httpx.HTTPError as exc:
            raise ScrapeError(f"Request failed: {exc}") from exc

        if response.status_code != 200:
            raise ScrapeError(f"HTTP {response.status_code}")

        article = self.parse(url, response.text)
        if not article.h1 and not article.meta_title:
            raise ScrapeError("No H1 or meta title found")
        return article

    def parse(self, url: str, html: str) -> Article:
        soup = BeautifulSoup(html, "html.parser")

        h1_tag = soup.find("h1")
        h1 = h1_tag.get_text(" ", strip=True) if h1_tag else ""

        meta_title = ""
        if soup.title and soup.title.string:
            meta_title = soup.title.string.strip()
        if not meta_title:
            meta_title = _meta_content(soup, property="og:title")

        description = _meta_content(soup, name="description") or _meta_content(
            soup, property="og:description"
        )

        body = soup.select_one(self.content_selector) if self.content_selector else None
        content = body.get_text(" ", strip=True) if body else ""

        return Article(
            url=url,
            h1=h1,
            meta_title=meta_title,
            meta_description=description,
            content=content,
        )

    async def aclose(self) -> None:
        await self._client.aclose()


def _meta_content(soup: BeautifulSoup, **attrs: str) -> str:
    tag = soup.find("meta", attrs=attrs)
    if tag is None:
        return ""
    value = tag.get("content") or ""
    return str(value).strip()
