"""Duplicate finding orchestrator."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable

from article_dedup.config import AppConfig
from article_dedup.models import (
    Article,
    DuplicateReport,
    Judgment,
    ScheduleStrategy,
)
from article_dedup.skills.consolidator import ConsolidationEngine
from article_dedup.skills.materializer import ResultMaterializer
from article_dedup.skills.scheduler import PairScheduler
from article_dedup.sources.base import ArticleStore
from article_dedup.workflow.state import AnalysisProgress

logger = logging.getLogger(__name__)

ProgressReporter = Callable[[str, dict[str, Any]], None]


class DuplicateFinder:
    """Run the duplicate analysis over the stored articles.

    Coordinates the pipeline:
    article store -> pair_scheduler -> oracle -> consolidation_engine
    -> result_materializer

    A run can be stopped through an ``asyncio.Event`` and resumed by
    calling ``run`` again; the article snapshot, the groups found so far and
    the scheduler cursor are kept until ``reset``.
    """

    def __init__(
        self,
        store: ArticleStore,
        scheduler: PairScheduler,
        strategy: ScheduleStrategy = ScheduleStrategy.BATCHED,
        engine: ConsolidationEngine | None = None,
        materializer: ResultMaterializer | None = None,
        progress_reporter: ProgressReporter | None = None,
    ) -> None:
        self._store = store
        self._scheduler = scheduler
        self._strategy = strategy
        self._engine = engine or ConsolidationEngine()
        self._materializer = materializer or ResultMaterializer()
        self._progress_reporter = progress_reporter
        self._articles: list[Article] | None = None
        self._progress = AnalysisProgress(strategy=strategy)

    @property
    def progress(self) -> AnalysisProgress:
        return self._progress

    @property
    def engine(self) -> ConsolidationEngine:
        return self._engine

    def _report_progress(self, phase: str, **details: Any) -> None:
        if not self._progress_reporter:
            return
        try:
            self._progress_reporter(phase, details)
        except Exception:  # pragma: no cover
            logger.exception("Progress reporter failed")

    def reset(self) -> None:
        """Forget the article snapshot, groups and cursor."""
        self._articles = None
        self._engine.reset()
        self._scheduler.reset()
        self._progress = AnalysisProgress(strategy=self._strategy)

    async def find_duplicates(self) -> DuplicateReport:
        """Fresh analysis of every stored article."""
        self.reset()
        return await self.run()

    async def run(self, stop: asyncio.Event | None = None) -> DuplicateReport:
        """Start, or resume, the analysis and return the groups found so far."""
        articles = await self._load_articles()
        n = len(articles)

        if n < 2:
            self._progress.is_complete = True
            self._report_progress("completed", article_count=n)
            return DuplicateReport()
        if self._progress.is_complete:
            return self.snapshot()

        cursor = self._progress.cursor
        if self._strategy == ScheduleStrategy.ONE_VS_REST:
            self._progress.completed_calls = min(cursor.primary_index, n - 1)
        else:
            self._progress.completed_calls = (
                cursor.pairs_completed(n) + self._scheduler.finished_ahead
            )

        self._report_progress(
            "analyzing",
            strategy=self._strategy.value,
            completed=self._progress.completed_calls,
            planned=self._progress.planned_calls,
        )
        t0 = time.perf_counter()
        try:
            async for judgment in self._scheduler.run(
                articles,
                self._strategy,
                cursor=cursor,
                stop=stop,
            ):
                self._apply(judgment)
        finally:
            self._progress.cursor = self._scheduler.cursor

        self._progress.is_complete = self._progress.cursor.is_done(n)
        if self._progress.is_complete:
            self._progress.completed_calls = self._progress.planned_calls

        report = self.snapshot()
        logger.info(
            "Analysis %s in %.1fs (%d/%d calls, %d groups, %d failures)",
            "completed" if self._progress.is_complete else "paused",
            time.perf_counter() - t0,
            self._progress.completed_calls,
            self._progress.planned_calls,
            len(report.duplicate_groups),
            len(self._progress.failures),
        )
        self._report_progress(
            "completed" if self._progress.is_complete else "paused",
            group_count=len(report.duplicate_groups),
            failure_count=len(self._progress.failures),
        )
        return report

    def snapshot(self) -> DuplicateReport:
        """Groups found so far, resolved against the current article snapshot."""
        return self._materializer.materialize(
            self._engine.snapshot(), self._articles or []
        )

    async def _load_articles(self) -> list[Article]:
        if self._articles is None:
            self._articles = await self._store.list_articles()
            n = len(self._articles)
            self._progress.article_count = n
            self._progress.planned_calls = PairScheduler.planned_calls(
                n, self._strategy
            )
            logger.info(
                "Loaded %d articles (%d oracle calls planned, strategy=%s)",
                n, self._progress.planned_calls, self._strategy.value,
            )
        return self._articles

    def _apply(self, judgment: Judgment) -> None:
        if judgment.failed:
            self._progress.record_failure(judgment)
        if self._engine.add(judgment):
            self._progress.positive_judgments += 1

        self._progress.cursor = self._scheduler.cursor
        if self._strategy == ScheduleStrategy.ONE_VS_REST:
            self._progress.completed_calls = self._progress.cursor.primary_index
        else:
            self._progress.completed_calls += 1

        self._report_progress(
            "judgment",
            url_a=judgment.url_a,
            url_b=judgment.url_b,
            is_duplicate=judgment.is_duplicate,
            error=judgment.error,
            completed=self._progress.completed_calls,
            planned=self._progress.planned_calls,
        )

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        store: ArticleStore | None = None,
        progress_reporter: ProgressReporter | None = None,
    ) -> DuplicateFinder:
        from article_dedup.llm import create_provider
        from article_dedup.skills.oracle import DuplicateOracle
        from article_dedup.sources.store import JsonArticleStore

        llm = create_provider(config.llm)
        oracle = DuplicateOracle(
            llm,
            criterion=config.dedup_criterion,
            similarity_threshold=config.dedup_similarity_threshold,
            max_content_chars=config.dedup_max_content_chars,
        )
        return cls(
            store=store or JsonArticleStore(config.article_store_path),
            scheduler=PairScheduler(
                oracle,
                batch_size=config.dedup_batch_size,
                max_concurrency=config.dedup_max_concurrency,
            ),
            strategy=config.dedup_strategy,
            progress_reporter=progress_reporter,
        )
