"""Data models for coverdiff."""

from coverdiff.models.coverage import (
    Block,
    FileCoverage,
    Package,
    Position,
    Profile,
    coverage_basis_points,
    coverage_ratio,
)

__all__ = [
    "Block",
    "FileCoverage",
    "Package",
    "Position",
    "Profile",
    "coverage_basis_points",
    "coverage_ratio",
]
