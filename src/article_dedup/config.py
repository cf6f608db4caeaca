"""Configuration loading for article-dedup."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from article_dedup.models import ComparisonCriterion, ScheduleStrategy

_API_KEY_FALLBACKS = {
    "claude": "ANTHROPIC_API_KEY",
    "gemini": "GOOGLE_API_KEY",
}

_DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


class LLMConfig(BaseModel):
    provider: str = "openai"
    model: str = ""
    api_key: str = ""
    base_url: str | None = None
    temperature: float = 0.0
    max_tokens: int = 1024


class ScrapeConfig(BaseModel):
    sitemap_url: str = ""
    article_path_marker: str = "/articles/"
    content_selector: str = ".prose"
    timeout_s: float = 20.0
    user_agent: str = _DEFAULT_USER_AGENT


class AppConfig(BaseModel):
    llm: LLMConfig = LLMConfig()
    scrape: ScrapeConfig = ScrapeConfig()
    article_store_path: str = "articles.json"
    dedup_strategy: ScheduleStrategy = ScheduleStrategy.BATCHED
    dedup_batch_size: int = Field(default=5, ge=1, le=10)
    dedup_max_concurrency: int = Field(default=5, ge=1)
    dedup_criterion: ComparisonCriterion = ComparisonCriterion.METADATA
    dedup_similarity_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    dedup_max_content_chars: int = 4000


def _resolve_api_key(provider: str) -> str:
    key = os.getenv(f"{provider.upper()}_API_KEY")
    if key:
        return key
    fallback = _API_KEY_FALLBACKS.get(provider.lower())
    if fallback and os.getenv(fallback):
        return os.getenv(fallback, "")
    return os.getenv("OPENAI_API_KEY", "")


def load_config(env_path: str | Path | None = None) -> AppConfig:
    """Load configuration from environment variables (.env file)."""
    if env_path:
        load_dotenv(env_path)
    else:
        load_dotenv()

    provider = os.getenv("LLM_PROVIDER", "openai")
    llm = LLMConfig(
        provider=provider,
        model=os.getenv("LLM_MODEL", ""),
        api_key=_resolve_api_key(provider),
        base_url=os.getenv("LLM_BASE_URL") or None,
        temperature=float(os.getenv("LLM_TEMPERATURE", "0.0")),
        max_tokens=int(os.getenv("LLM_MAX_TOKENS", "1024")),
    )

    scrape = ScrapeConfig(
        sitemap_url=os.getenv("SITEMAP_URL", ""),
        article_path_marker=os.getenv("ARTICLE_PATH_MARKER", "/articles/"),
        content_selector=os.getenv("CONTENT_SELECTOR", ".prose"),
        timeout_s=float(os.getenv("SCRAPE_TIMEOUT_S", "20.0")),
        user_agent=os.getenv("USER_AGENT", _DEFAULT_USER_AGENT),
    )

    return AppConfig(
        llm=llm,
        scrape=scrape,
        article_store_path=os.getenv("ARTICLE_STORE_PATH", "articles.json"),
        dedup_strategy=ScheduleStrategy(os.getenv("DEDUP_STRATEGY", "batched")),
        dedup_batch_size=int(os.getenv("DEDUP_BATCH_SIZE", "5")),
        dedup_max_concurrency=int(os.getenv("DEDUP_MAX_CONCURRENCY", "5")),
        dedup_criterion=ComparisonCriterion(
            os.getenv("DEDUP_CRITERION", "metadata")
        ),
        dedup_similarity_threshold=float(
            os.getenv("DEDUP_SIMILARITY_THRESHOLD", "0.8")
        ),
        dedup_max_content_chars=int(os.getenv("DEDUP_MAX_CONTENT_CHARS", "4000")),
    )
