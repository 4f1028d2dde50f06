"""Coverage delta analyzer: compare a base and a head cover profile.

Produces one row per package known to either side (plus any extra packages
discovered in the module), sorted by import path, and a totals row computed
from the profiles' own statement counts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from coverdiff.models.coverage import coverage_basis_points

if TYPE_CHECKING:
    from collections.abc import Iterable

    from coverdiff.models.coverage import Profile

logger = logging.getLogger(__name__)

TOTAL_IDENTIFIER = "total:"


class DeltaStatus(Enum):
    """Classification of a package between base and head."""

    NO_DATA = "no_data"  # No statements on either side
    NEW = "new"  # Only head has statements
    REMOVED = "removed"  # Only base has statements
    UNCHANGED = "unchanged"
    IMPROVED = "improved"
    REGRESSED = "regressed"


@dataclass(frozen=True)
class DeltaRow:
    """Base and head coverage of one package (or of the whole profile)."""

    identifier: str
    """Package import path, or ``TOTAL_IDENTIFIER`` for the totals row."""

    base: int | None
    """Base coverage in basis points, None when there is no data."""

    head: int | None
    """Head coverage in basis points, None when there is no data."""

    @property
    def status(self) -> DeltaStatus:
        if self.base is None and self.head is None:
            return DeltaStatus.NO_DATA
        if self.base is None:
            return DeltaStatus.NEW
        if self.head is None:
            return DeltaStatus.REMOVED
        if self.head > self.base:
            return DeltaStatus.IMPROVED
        if self.head < self.base:
            return DeltaStatus.REGRESSED
        return DeltaStatus.UNCHANGED

    @property
    def delta(self) -> int | None:
        """Return ``head - base`` in basis points when both sides have data."""
        if self.base is None or self.head is None:
            return None
        return self.head - self.base


@dataclass
class CoverageDiff:
    """Result of comparing two profiles."""

    rows: list[DeltaRow]
    """Per-package rows sorted by identifier."""

    total: DeltaRow
    """Whole-profile comparison."""

    def changed_rows(self) -> list[DeltaRow]:
        """Return rows whose classification is anything but unchanged or no data."""
        return [
            row
            for row in self.rows
            if row.status not in {DeltaStatus.UNCHANGED, DeltaStatus.NO_DATA}
        ]


def collect_package_names(*profiles: Profile, extra: Iterable[str] = ()) -> list[str]:
    """Return the sorted union of package names across ``profiles`` and ``extra``."""
    names: set[str] = set(extra)
    for profile in profiles:
        names.update(profile.packages)
    return sorted(names)


def diff_profiles(
    base: Profile,
    head: Profile,
    *,
    extra_packages: Iterable[str] = (),
) -> CoverageDiff:
    """Compare ``base`` against ``head`` package by package.

    Args:
        base: Profile of the target branch.
        head: Profile of the change under review.
        extra_packages: Package paths to include even when neither profile
            has coverage lines for them (e.g. from ``go list ./...``).

    Returns:
        The per-package rows and the totals row.
    """
    rows = [
        DeltaRow(
            identifier=name,
            base=coverage_basis_points(base.packages.get(name)),
            head=coverage_basis_points(head.packages.get(name)),
        )
        for name in collect_package_names(base, head, extra=extra_packages)
    ]
    total = DeltaRow(
        identifier=TOTAL_IDENTIFIER,
        base=coverage_basis_points(base),
        head=coverage_basis_points(head),
    )

    logger.debug(
        "Compared %d packages: total %s -> %s (%s)",
        len(rows),
        total.base,
        total.head,
        total.status.value,
    )
    return CoverageDiff(rows=rows, total=total)
