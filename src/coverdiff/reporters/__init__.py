"""Reporters for coverage diffs."""

from __future__ import annotations

from coverdiff.reporters.github_comment import GitHubCommentReporter
from coverdiff.reporters.table import build_table, summarize
from coverdiff.reporters.terminal import reporter

__all__ = [
    "GitHubCommentReporter",
    "build_table",
    "reporter",
    "summarize",
]
