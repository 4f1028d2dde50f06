"""Coverage profile models.

A parsed Go cover profile is a three level tree: ``Profile`` -> ``Package`` ->
``Block``.  Statement and covered-statement counters are kept at the package
and profile level so ratios never need a second pass over the blocks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

# Ratios are compared and rendered in hundredths of a percent.
BASIS_POINTS = 10000


class CoverageAggregate(Protocol):
    """Anything carrying statement and covered-statement totals."""

    total_statements: int
    covered_statements: int


@dataclass(frozen=True)
class Position:
    """A 1-based (line, column) position in a source file."""

    line: int
    column: int


@dataclass(frozen=True)
class Block:
    """One statement range from a cover profile."""

    file_name: str
    """Base name of the source file (the directory is the owning package)."""

    start: Position
    """First position of the range."""

    end: Position
    """End position of the range (exclusive)."""

    statement_count: int
    """Number of statements attributed to the range."""

    hit_count: int
    """How many times the range was executed."""

    @property
    def is_covered(self) -> bool:
        """Return True if the range was executed at least once."""
        return self.hit_count > 0


@dataclass
class FileCoverage:
    """Statement totals for a single source file within a package."""

    file_name: str
    total_statements: int = 0
    covered_statements: int = 0

    @property
    def ratio(self) -> float | None:
        return coverage_ratio(self)

    @property
    def basis_points(self) -> int | None:
        return coverage_basis_points(self)


@dataclass
class Package:
    """Coverage data for one Go package."""

    name: str
    """Import path of the package (directory of the profiled files)."""

    blocks: list[Block] = field(default_factory=list)
    """Statement ranges in the order they appeared in the profile."""

    total_statements: int = 0
    """Sum of ``statement_count`` over all blocks."""

    covered_statements: int = 0
    """Sum of ``statement_count`` over blocks with a non-zero hit count."""

    def add_block(self, block: Block) -> None:
        """Append a block and account for its statements."""
        self.blocks.append(block)
        self.total_statements += block.statement_count
        if block.is_covered:
            self.covered_statements += block.statement_count

    def files(self) -> dict[str, FileCoverage]:
        """Return per-file totals, keyed by file name in first-seen order."""
        files: dict[str, FileCoverage] = {}
        for block in self.blocks:
            file_cov = files.get(block.file_name)
            if file_cov is None:
                file_cov = FileCoverage(file_name=block.file_name)
                files[block.file_name] = file_cov
            file_cov.total_statements += block.statement_count
            if block.is_covered:
                file_cov.covered_statements += block.statement_count
        return files

    @property
    def ratio(self) -> float | None:
        return coverage_ratio(self)

    @property
    def basis_points(self) -> int | None:
        return coverage_basis_points(self)


@dataclass
class Profile:
    """A complete cover profile for one test run."""

    mode: str = ""
    """Value of the ``mode:`` header (set, count, atomic)."""

    packages: dict[str, Package] = field(default_factory=dict)
    """Packages keyed by import path. Iteration order carries no meaning."""

    total_statements: int = 0
    covered_statements: int = 0

    def package(self, name: str) -> Package:
        """Return the package called ``name``, creating it on first use."""
        pkg = self.packages.get(name)
        if pkg is None:
            pkg = Package(name=name)
            self.packages[name] = pkg
        return pkg

    def add_block(self, package_name: str, block: Block) -> None:
        """Record ``block`` under ``package_name`` and update profile totals."""
        self.package(package_name).add_block(block)
        self.total_statements += block.statement_count
        if block.is_covered:
            self.covered_statements += block.statement_count

    @property
    def ratio(self) -> float | None:
        return coverage_ratio(self)

    @property
    def basis_points(self) -> int | None:
        return coverage_basis_points(self)


def coverage_ratio(aggregate: CoverageAggregate | None) -> float | None:
    """Return ``covered / total`` for an aggregate.

    Returns None ("no data") when the aggregate is missing or holds no
    statements, which keeps an empty package distinct from a 0% one.
    """
    if aggregate is None or aggregate.total_statements < 1:
        return None
    return aggregate.covered_statements / aggregate.total_statements


def coverage_basis_points(aggregate: CoverageAggregate | None) -> int | None:
    """Return coverage in hundredths of a percent, truncated (3175 == 31.75%)."""
    if aggregate is None or aggregate.total_statements < 1:
        return None
    return aggregate.covered_statements * BASIS_POINTS // aggregate.total_statements
