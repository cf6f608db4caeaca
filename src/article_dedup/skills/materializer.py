"""Result materializer skill: Group[] + Article[] -> DuplicateReport."""

from __future__ import annotations

from article_dedup.models import (
    Article,
    ArticleRef,
    DuplicateGroup,
    DuplicateReport,
    Group,
)

DEFAULT_REASON = "Found to be a duplicate or heavily related."


class ResultMaterializer:
    """Project engine groups onto the current article lookup.

    URLs missing from ``articles`` are dropped from their group; a group is
    only reported while at least two of its members still resolve.
    """

    def __init__(self, default_reason: str = DEFAULT_REASON) -> None:
        self._default_reason = default_reason

    def materialize(
        self, groups: list[Group], articles: list[Article]
    ) -> DuplicateReport:
        position = {a.url: i for i, a in enumerate(articles)}
        lookup = {a.url: a for a in articles}

        resolved: list[tuple[int, DuplicateGroup]] = []
        for group in groups:
            urls = sorted(
                (u for u in group.members if u in lookup),
                key=position.__getitem__,
            )
            if len(urls) < 2:
                continue
            refs = [
                ArticleRef(title=lookup[u].display_title, url=u) for u in urls
            ]
            resolved.append((
                position[urls[0]],
                DuplicateGroup(
                    reason=group.reason or self._default_reason,
                    articles=refs,
                ),
            ))

        resolved.sort(key=lambda item: item[0])
        return DuplicateReport(duplicate_groups=[g for _, g in resolved])
