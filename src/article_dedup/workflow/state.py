"""Analysis progress tracking for pausable duplicate runs."""

from __future__ import annotations

from pydantic import BaseModel, Field

from article_dedup.models import (
    Judgment,
    PairFailure,
    ScheduleCursor,
    ScheduleStrategy,
)


class AnalysisProgress(BaseModel):
    """Where a duplicate analysis run stands.

    ``cursor`` is the scheduler position to resume from; it is only
    meaningful together with the article snapshot the run was started on.
    """

    strategy: ScheduleStrategy = ScheduleStrategy.BATCHED
    article_count: int = 0
    planned_calls: int = 0
    completed_calls: int = 0
    positive_judgments: int = 0
    failures: list[PairFailure] = []
    cursor: ScheduleCursor = Field(default_factory=ScheduleCursor)
    is_complete: bool = False

    @property
    def fraction_done(self) -> float:
        if self.planned_calls <= 0:
            return 1.0 if self.is_complete else 0.0
        return min(1.0, self.completed_calls / self.planned_calls)

    def record_failure(self, judgment: Judgment) -> None:
        self.failures.append(
            PairFailure(
                url_a=judgment.url_a,
                url_b=judgment.url_b,
                reason=judgment.error or "",
            )
        )
