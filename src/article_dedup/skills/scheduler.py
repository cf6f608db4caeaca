"""Pair scheduler skill: Article[] -> stream of Judgment (bounded oracle load)."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Iterator

from article_dedup.models import Article, Judgment, ScheduleCursor, ScheduleStrategy
from article_dedup.skills.oracle import DuplicateOracle

logger = logging.getLogger(__name__)

MAX_BATCH_SIZE = 10


def iter_pairs(n: int, cursor: ScheduleCursor) -> Iterator[tuple[int, int]]:
    """Yield index pairs ``(i, j)``, ``i < j``, from ``cursor`` to the end."""
    cursor = cursor.normalized(n)
    while not cursor.is_done(n):
        yield cursor.current_pair()
        cursor = cursor.advanced(n)


def _stopped(stop: asyncio.Event | None) -> bool:
    return stop is not None and stop.is_set()


async def _cancel(tasks: list[asyncio.Task]) -> None:
    for task in tasks:
        if not task.done():
            task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)


class PairScheduler:
    """Enumerate comparisons and drive them through the oracle.

    Pair order is fixed by article order: ``(articles[i], articles[j])`` for
    ``i < j``. ``cursor`` always points at the first comparison not yet
    known to be complete, so a caller can persist it and resume a later run
    without re-issuing finished calls.

    The ``stop`` event is checked before every new pair, batch or primary.
    Calls already in flight are allowed to finish.
    """

    def __init__(
        self,
        oracle: DuplicateOracle,
        *,
        batch_size: int = 5,
        max_concurrency: int = 5,
    ) -> None:
        self._oracle = oracle
        self._batch_size = max(1, min(MAX_BATCH_SIZE, batch_size))
        self._max_concurrency = max(1, max_concurrency)
        self.cursor = ScheduleCursor()
        # Pairs finished out of order, beyond the cursor.
        self._finished_ahead: set[tuple[int, int]] = set()

    @property
    def batch_size(self) -> int:
        return self._batch_size

    @property
    def finished_ahead(self) -> int:
        """Completed comparisons that lie beyond ``cursor``."""
        return len(self._finished_ahead)

    def reset(self) -> None:
        self.cursor = ScheduleCursor()
        self._finished_ahead.clear()

    @staticmethod
    def planned_calls(n: int, strategy: ScheduleStrategy) -> int:
        """Number of oracle calls a full run issues for ``n`` articles."""
        if n < 2:
            return 0
        if strategy == ScheduleStrategy.ONE_VS_REST:
            return n - 1
        return ScheduleCursor.total_pairs(n)

    async def run(
        self,
        articles: list[Article],
        strategy: ScheduleStrategy = ScheduleStrategy.BATCHED,
        *,
        cursor: ScheduleCursor | None = None,
        stop: asyncio.Event | None = None,
    ) -> AsyncIterator[Judgment]:
        """Yield one Judgment per completed comparison.

        Negative and failed judgments are yielded as well. Per-pair oracle
        failures never end the run; with ``ONE_VS_REST`` an ``OracleError``
        propagates to the caller.
        """
        if cursor is not None:
            self.cursor = cursor
            self._finished_ahead = {
                p for p in self._finished_ahead if p >= cursor.current_pair()
            }
        if len(articles) < 2:
            return

        match strategy:
            case ScheduleStrategy.ALL_PAIRS:
                stream = self._run_all_pairs(articles, stop)
            case ScheduleStrategy.BATCHED:
                stream = self._run_batched(articles, self._batch_size, stop)
            case ScheduleStrategy.SINGLE_STEP:
                stream = self._run_batched(articles, 1, stop)
            case ScheduleStrategy.ONE_VS_REST:
                stream = self._run_one_vs_rest(articles, stop)
            case _:
                raise ValueError(f"Unknown schedule strategy: {strategy}")

        try:
            async for judgment in stream:
                yield judgment
        finally:
            await stream.aclose()

    # ------------------------------------------------------------------
    # Per-pair strategies
    # ------------------------------------------------------------------

    async def _run_batched(
        self,
        articles: list[Article],
        batch_size: int,
        stop: asyncio.Event | None,
    ) -> AsyncIterator[Judgment]:
        n = len(articles)
        cursor = self.cursor.normalized(n)
        while not cursor.is_done(n):
            if _stopped(stop):
                logger.info(
                    "Stop requested, pausing at pair %s", cursor.current_pair()
                )
                break

            batch: list[tuple[int, int]] = []
            next_cursor = cursor
            while len(batch) < batch_size and not next_cursor.is_done(n):
                batch.append(next_cursor.current_pair())
                next_cursor = next_cursor.advanced(n)

            tasks = [
                asyncio.create_task(self._oracle.compare(articles[i], articles[j]))
                for i, j in batch
            ]
            try:
                for next_done in asyncio.as_completed(tasks):
                    yield await next_done
            finally:
                await _cancel(tasks)

            cursor = next_cursor
            self.cursor = cursor

    async def _run_all_pairs(
        self,
        articles: list[Article],
        stop: asyncio.Event | None,
    ) -> AsyncIterator[Judgment]:
        """Issue every remaining pair at once, gated by a semaphore.

        Results complete out of order. The cursor advances over the finished
        prefix of the enumeration; pairs finished beyond it are remembered in
        ``_finished_ahead`` and skipped when a stopped pass is resumed.
        """
        n = len(articles)
        self.cursor = self.cursor.normalized(n)
        pairs = [p for p in iter_pairs(n, self.cursor) if p not in self._finished_ahead]
        semaphore = asyncio.Semaphore(self._max_concurrency)
        skipped = 0

        async def _compare(i: int, j: int) -> tuple[tuple[int, int], Judgment] | None:
            nonlocal skipped
            async with semaphore:
                if _stopped(stop):
                    skipped += 1
                    return None
                return (i, j), await self._oracle.compare(articles[i], articles[j])

        logger.info(
            "Comparing %d pairs (concurrency=%d)", len(pairs), self._max_concurrency
        )
        tasks = [asyncio.create_task(_compare(i, j)) for i, j in pairs]
        try:
            for next_done in asyncio.as_completed(tasks):
                result = await next_done
                if result is None:
                    continue
                pair, judgment = result
                self._mark_finished(pair, n)
                yield judgment
        finally:
            await _cancel(tasks)

        if skipped:
            logger.info(
                "Stop requested, %d pairs not issued, pausing at pair %s",
                skipped, self.cursor.current_pair(),
            )

    def _mark_finished(self, pair: tuple[int, int], n: int) -> None:
        self._finished_ahead.add(pair)
        cursor = self.cursor
        while not cursor.is_done(n) and cursor.current_pair() in self._finished_ahead:
            self._finished_ahead.discard(cursor.current_pair())
            cursor = cursor.advanced(n)
        self.cursor = cursor

    # ------------------------------------------------------------------
    # One-vs-rest
    # ------------------------------------------------------------------

    async def _run_one_vs_rest(
        self,
        articles: list[Article],
        stop: asyncio.Event | None,
    ) -> AsyncIterator[Judgment]:
        n = len(articles)
        known = {a.url for a in articles}
        cursor = ScheduleCursor(primary_index=self.cursor.primary_index)
        visited = {a.url for a in articles[: cursor.primary_index]}

        while not cursor.is_done(n):
            if _stopped(stop):
                logger.info("Stop requested, pausing at primary %d", cursor.primary_index)
                break

            primary = articles[cursor.primary_index]
            others = [a for a in articles if a.url != primary.url]
            batch = await self._oracle.compare_many(primary, others)
            visited.add(primary.url)

            for match in batch.duplicates:
                if match.url in visited or match.url not in known:
                    continue
                yield Judgment(
                    url_a=primary.url,
                    url_b=match.url,
                    is_duplicate=True,
                    reason=match.reason or None,
                )

            cursor = cursor.next_primary()
            self.cursor = cursor
