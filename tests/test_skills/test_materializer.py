"""Tests for ResultMaterializer."""

from __future__ import annotations

from article_dedup.models import Article, Group
from article_dedup.skills.materializer import DEFAULT_REASON, ResultMaterializer

_ARTICLES = [
    Article(url="u1", h1="One", meta_title="Meta One"),
    Article(url="u2", h1="Two"),
    Article(url="u3", meta_title="Meta Three"),
    Article(url="u4", meta_title="Meta Four"),
]


def _group(*members: str, reason: str = "dup") -> Group:
    return Group(id=members[0], members=frozenset(members), reason=reason)


class TestMaterialize:
    def test_basic_projection(self):
        report = ResultMaterializer().materialize(
            [_group("u3", "u1", reason="Identical H1")], _ARTICLES
        )
        assert len(report.duplicate_groups) == 1
        group = report.duplicate_groups[0]
        assert group.reason == "Identical H1"
        assert [(a.title, a.url) for a in group.articles] == [
            ("Meta One", "u1"),
            ("Meta Three", "u3"),
        ]

    def test_title_falls_back_to_h1(self):
        report = ResultMaterializer().materialize([_group("u1", "u2")], _ARTICLES)
        assert report.duplicate_groups[0].articles[1].title == "Two"

    def test_unresolvable_urls_dropped(self):
        report = ResultMaterializer().materialize(
            [_group("u1", "u2", "gone")], _ARTICLES
        )
        assert [a.url for a in report.duplicate_groups[0].articles] == ["u1", "u2"]

    def test_group_below_two_resolvable_dropped(self):
        report = ResultMaterializer().materialize(
            [_group("u1", "gone"), _group("x", "y")], _ARTICLES
        )
        assert report.duplicate_groups == []

    def test_default_reason(self):
        report = ResultMaterializer().materialize(
            [_group("u1", "u2", reason="")], _ARTICLES
        )
        assert report.duplicate_groups[0].reason == DEFAULT_REASON

    def test_groups_ordered_by_first_article(self):
        report = ResultMaterializer().materialize(
            [_group("u3", "u4", reason="b"), _group("u1", "u2", reason="a")],
            _ARTICLES,
        )
        assert [g.reason for g in report.duplicate_groups] == ["a", "b"]

    def test_empty(self):
        assert ResultMaterializer().materialize([], []).duplicate_groups == []
