"""Analyzers comparing coverage profiles."""

from coverdiff.analyzers.delta import (
    TOTAL_IDENTIFIER,
    CoverageDiff,
    DeltaRow,
    DeltaStatus,
    collect_package_names,
    diff_profiles,
)

__all__ = [
    "TOTAL_IDENTIFIER",
    "CoverageDiff",
    "DeltaRow",
    "DeltaStatus",
    "collect_package_names",
    "diff_profiles",
]
