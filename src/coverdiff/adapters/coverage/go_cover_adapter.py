"""Go coverage adapter: parse cover profiles written by ``go test -coverprofile``.

Format: a ``mode: <name>`` header followed by one line per statement range:
``path/to/file.go:startLine.startCol,endLine.endCol numStmts count``.
See golang.org/x/tools/cover for the reference reader.
"""

from __future__ import annotations

import logging
import posixpath
import re
from typing import TYPE_CHECKING

from coverdiff.adapters.coverage.base import CoverageAdapter, FormatError
from coverdiff.models.coverage import Block, Position, Profile

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

# ── Constants ────────────────────────────────────────────────────

_GO_MOD = "go.mod"
_HEADER_PREFIX = "mode: "

# Cover profile: "file:startLine.startCol,endLine.endCol numStmts count"
_COVER_LINE_REGEX = re.compile(
    r"^([^:]+):([0-9]+)\.([0-9]+),([0-9]+)\.([0-9]+) ([0-9]+) ([0-9]+)$"
)


# ── Parsing ──────────────────────────────────────────────────────


def parse_cover_profile(text: str) -> Profile:
    """Parse the text of a Go cover profile.

    Args:
        text: Full profile content.

    Returns:
        The parsed profile with package and profile totals filled in.

    Raises:
        FormatError: If the header is missing or any body line is malformed.
    """
    if not text:
        raise FormatError("missing header")
    # Only \n ends a line; other Unicode separators are legal inside paths
    lines = [line.removesuffix("\r") for line in text.split("\n")]

    header = lines[0]
    if not header.startswith(_HEADER_PREFIX):
        raise FormatError(
            f"invalid header: profile must start with [{_HEADER_PREFIX}], got {header!r}",
            line=header,
        )

    profile = Profile(mode=header[len(_HEADER_PREFIX) :].strip())

    for line_number, line in enumerate(lines[1:], start=1):
        if not line.strip():
            continue
        match = _COVER_LINE_REGEX.match(line)
        if not match:
            raise FormatError(
                f"malformed coverage line {line_number}: {line}",
                line_number=line_number,
                line=line,
            )

        path = match.group(1)
        start_line, start_col, end_line, end_col, num_stmts, count = (
            int(value) for value in match.groups()[1:]
        )

        profile.add_block(
            posixpath.dirname(path) or ".",
            Block(
                file_name=posixpath.basename(path),
                start=Position(line=start_line, column=start_col),
                end=Position(line=end_line, column=end_col),
                statement_count=num_stmts,
                hit_count=count,
            ),
        )

    logger.debug(
        "Parsed cover profile: mode=%s packages=%d statements=%d covered=%d",
        profile.mode,
        len(profile.packages),
        profile.total_statements,
        profile.covered_statements,
    )
    return profile


def load_cover_profile(coverage_file: Path) -> Profile:
    """Read and parse a cover profile from disk.

    Raises:
        FormatError: If the profile is malformed.
        OSError: If the file cannot be read.
    """
    text = coverage_file.read_text(encoding="utf-8")
    return parse_cover_profile(text)


# ── Adapter ──────────────────────────────────────────────────────


class GoCoverAdapter(CoverageAdapter):
    """Go cover profile adapter."""

    @property
    def name(self) -> str:
        return "go_cover"

    @property
    def language(self) -> str:
        return "go"

    def detect(self, project_path: Path) -> bool:
        """Return True when go.mod exists (Go project)."""
        return (project_path / _GO_MOD).is_file()

    def parse_coverage_file(self, coverage_file: Path) -> Profile:
        """Parse a Go cover profile file into a ``Profile``."""
        logger.info("Reading cover profile %s", coverage_file)
        try:
            return load_cover_profile(coverage_file)
        except FormatError as exc:
            logger.error("Invalid cover profile %s: %s", coverage_file, exc)
            raise
