"""Dev CLI for article-dedup.

Usage:
    python -m article_dedup scrape [sitemap_url]
    python -m article_dedup analyze
"""

from __future__ import annotations

import asyncio
import logging
import os
import sys

_USAGE = "Usage: python -m article_dedup scrape [sitemap_url] | analyze"


def main() -> None:
    if len(sys.argv) < 2 or sys.argv[1] not in {"scrape", "analyze"}:
        print(_USAGE, file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    command, args = sys.argv[1], sys.argv[2:]
    try:
        if command == "scrape":
            output = asyncio.run(_scrape(args[0] if args else None))
        else:
            output = asyncio.run(_analyze())
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(output)


async def _scrape(sitemap_url: str | None) -> str:
    from article_dedup.config import load_config
    from article_dedup.workflow import scrape_sitemap

    config = load_config()
    report = await scrape_sitemap(config, sitemap_url=sitemap_url)
    lines = [f"Stored {len(report.stored_urls)} articles in {config.article_store_path}"]
    for failure in report.failures:
        lines.append(f"  failed: {failure.url}: {failure.error}")
    return "\n".join(lines)


async def _analyze() -> str:
    from article_dedup import export_markdown, find_duplicates
    from article_dedup.config import load_config

    config = load_config()
    return export_markdown(await find_duplicates(config))


if __name__ == "__main__":
    main()
