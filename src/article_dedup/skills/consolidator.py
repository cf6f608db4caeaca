"""Consolidation engine: Judgment stream -> partition of URLs into groups."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from article_dedup.models import Group, Judgment

logger = logging.getLogger(__name__)


class ConsolidationEngine:
    """Maintain duplicate groups implied by the positive judgments seen so far.

    Union-find over URLs. Each root carries the group's identity (the first
    URL of the judgment that created it), its first-seen reason and its
    size. When a judgment links members of two existing groups, the smaller
    group is absorbed into the larger one, so every URL belongs to exactly
    one group at all times and the final memberships do not depend on the
    order judgments arrive in.

    One engine per analysis run; call ``reset`` before reusing it.
    """

    def __init__(self) -> None:
        self._parent: dict[str, str] = {}
        self._size: dict[str, int] = {}
        self._group_id: dict[str, str] = {}
        self._reason: dict[str, str] = {}
        self._seen_keys: set[tuple[str, str]] = set()
        self._log: list[Judgment] = []
        self.ignored = 0
        self.merges = 0

    @classmethod
    def from_judgments(cls, judgments: Iterable[Judgment]) -> ConsolidationEngine:
        """Rebuild an engine from a judgment log."""
        engine = cls()
        engine.add_many(judgments)
        return engine

    def reset(self) -> None:
        self.__init__()

    @property
    def judgments(self) -> list[Judgment]:
        """Append-only log of the positive judgments that were applied."""
        return list(self._log)

    def __len__(self) -> int:
        return sum(1 for url in self._parent if self._parent[url] == url)

    def __contains__(self, url: object) -> bool:
        return url in self._parent

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def add(self, judgment: Judgment) -> bool:
        """Apply one judgment. Returns True if the partition may have changed."""
        if not judgment.is_duplicate or judgment.url_a == judgment.url_b:
            self.ignored += 1
            return False

        key = judgment.key
        if key in self._seen_keys:
            return False
        self._seen_keys.add(key)
        self._log.append(judgment)

        a, b = judgment.url_a, judgment.url_b
        reason = judgment.reason or ""
        known_a, known_b = a in self._parent, b in self._parent

        if not known_a and not known_b:
            self._make_group(a, b, reason)
        elif known_a and not known_b:
            self._attach(b, self._find(a))
        elif known_b and not known_a:
            self._attach(a, self._find(b))
        else:
            root_a, root_b = self._find(a), self._find(b)
            if root_a != root_b:
                self._merge(root_a, root_b)
        return True

    def add_many(self, judgments: Iterable[Judgment]) -> int:
        return sum(1 for j in judgments if self.add(j))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def group_of(self, url: str) -> Group | None:
        if url not in self._parent:
            return None
        root = self._find(url)
        members = frozenset(u for u in self._parent if self._find(u) == root)
        return self._group(root, members)

    def snapshot(self) -> list[Group]:
        """Point-in-time partition, groups with at least two members only."""
        members: dict[str, set[str]] = {}
        for url in self._parent:
            members.setdefault(self._find(url), set()).add(url)

        groups = [
            self._group(root, frozenset(urls))
            for root, urls in members.items()
            if len(urls) > 1
        ]
        groups.sort(key=lambda g: min(g.members))
        return groups

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _find(self, url: str) -> str:
        while self._parent[url] != url:
            self._parent[url] = self._parent[self._parent[url]]
            url = self._parent[url]
        return url

    def _make_group(self, a: str, b: str, reason: str) -> None:
        self._parent[a] = a
        self._parent[b] = a
        self._size[a] = 2
        self._group_id[a] = a
        self._reason[a] = reason

    def _attach(self, url: str, root: str) -> None:
        self._parent[url] = root
        self._size[root] += 1

    def _merge(self, root_a: str, root_b: str) -> None:
        keep, absorb = root_a, root_b
        if self._size[root_b] > self._size[root_a]:
            keep, absorb = root_b, root_a

        logger.debug(
            "Merging group %s (%d) into %s (%d)",
            self._group_id[absorb], self._size[absorb],
            self._group_id[keep], self._size[keep],
        )
        self._parent[absorb] = keep
        self._size[keep] += self._size.pop(absorb)
        self._group_id.pop(absorb)
        # First reason wins: the surviving group keeps its own, falling
        # back to the absorbed one only if it never had any.
        absorbed_reason = self._reason.pop(absorb)
        if not self._reason[keep]:
            self._reason[keep] = absorbed_reason
        self.merges += 1

    def _group(self, root: str, members: frozenset[str]) -> Group:
        return Group(
            id=self._group_id[root],
            members=members,
            reason=self._reason[root],
        )
