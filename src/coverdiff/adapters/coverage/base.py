"""Base classes for coverage adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from coverdiff.models.coverage import Profile


class FormatError(ValueError):
    """Raised when a coverage report does not follow its native format.

    A single bad line invalidates the whole report; adapters never return a
    partially parsed profile.
    """

    def __init__(self, message: str, *, line_number: int | None = None, line: str | None = None):
        """Initialize the error.

        Args:
            message: Human-readable description of the problem.
            line_number: 1-based number of the offending line in the report body.
            line: Raw content of the offending line.
        """
        super().__init__(message)
        self.line_number = line_number
        self.line = line


class CoverageAdapter(ABC):
    """Abstract base class for coverage report adapters.

    Each concrete adapter knows how to read one native coverage format and
    turn it into a ``Profile``.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Coverage tool identifier (e.g. 'go_cover')."""

    @property
    @abstractmethod
    def language(self) -> str:
        """Primary language (e.g. 'go')."""

    @abstractmethod
    def detect(self, project_path: Path) -> bool:
        """Return True if this coverage format applies to ``project_path``."""

    @abstractmethod
    def parse_coverage_file(self, coverage_file: Path) -> Profile:
        """Parse a coverage report file.

        Args:
            coverage_file: Path to the native coverage report file.

        Returns:
            The parsed profile.

        Raises:
            FormatError: If the file content is malformed.
            OSError: If the file cannot be read.
        """
