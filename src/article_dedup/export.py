"""Export utilities for DuplicateReport."""

from __future__ import annotations

from article_dedup.models import DuplicateReport


def export_json(report: DuplicateReport, indent: int = 2) -> str:
    """Serialize report to JSON string."""
    return report.model_dump_json(indent=indent)


def export_markdown(report: DuplicateReport) -> str:
    """Generate a Markdown listing of duplicate groups."""
    if not report.duplicate_groups:
        return "No duplicate or heavily related articles were found."

    sections = []
    for i, group in enumerate(report.duplicate_groups, 1):
        lines = [f"## Group {i}: {_escape_markdown(group.reason)}", ""]
        for article in group.articles:
            lines.append(f"- [{_escape_markdown(article.title)}]({article.url})")
        sections.append("\n".join(lines))
    return "\n\n".join(sections)


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------

_MARKDOWN_SPECIAL = str.maketrans({
    "[": r"\[",
    "]": r"\]",
    "*": r"\*",
    "_": r"\_",
})


def _escape_markdown(text: str) -> str:
    """Escape characters that would break link text or emphasis."""
    return text.translate(_MARKDOWN_SPECIAL)
