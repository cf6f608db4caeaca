"""Workflow orchestration package."""

from article_dedup.workflow.engine import DuplicateFinder, ProgressReporter
from article_dedup.workflow.scrape import scrape_and_store, scrape_sitemap
from article_dedup.workflow.state import AnalysisProgress

__all__ = [
    "AnalysisProgress",
    "DuplicateFinder",
    "ProgressReporter",
    "scrape_and_store",
    "scrape_sitemap",
]
