"""Fixed-width coverage delta table and summary line.

The table is meant to be embedded in a fenced code block, so every line has
the same layout regardless of content:

    package                 before    after    delta
    -------                -------  -------  -------
    my/package              37.50%        -     gone
                    total:  33.33%   41.25%   +7.92%
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from coverdiff.analyzers.delta import DeltaStatus

if TYPE_CHECKING:
    from collections.abc import Sequence

    from coverdiff.analyzers.delta import CoverageDiff, DeltaRow

# ── Constants ────────────────────────────────────────────────────

DEFAULT_PACKAGE_WIDTH = 80
_VALUE_WIDTH = 8
_RULE = "-------"
_NO_VALUE = "-"

_STATUS_WORDS = {
    DeltaStatus.NO_DATA: "n/a",
    DeltaStatus.NEW: "new",
    DeltaStatus.REMOVED: "gone",
}

SUMMARY_UNCHANGED = "Coverage unchanged."
SUMMARY_DECREASED = "Coverage decreased by {amount}%."
SUMMARY_INCREASED = "Coverage increased by {amount}%."


# ── Value formatting ─────────────────────────────────────────────


def _format_points(points: int) -> str:
    """Format a non-negative basis-point value as ``12.34``."""
    return f"{points // 100}.{points % 100:02d}"


def format_coverage(basis_points: int | None) -> str:
    """Format a coverage value as ``37.50%``, or ``-`` when there is no data."""
    if basis_points is None:
        return _NO_VALUE
    return f"{_format_points(basis_points)}%"


def format_delta(row: DeltaRow, *, hide_unchanged: bool = False) -> str:
    """Format the delta column for ``row``.

    Args:
        row: The row to describe.
        hide_unchanged: Render an exact zero delta as an empty string.

    Returns:
        A signed percentage (``+7.92%``) or one of ``new``, ``gone``, ``n/a``.
    """
    delta = row.delta
    if delta is None:
        return _STATUS_WORDS[row.status]
    if delta == 0 and hide_unchanged:
        return ""
    sign = "-" if delta < 0 else "+"
    return f"{sign}{_format_points(abs(delta))}%"


# ── Package names ────────────────────────────────────────────────


def relative_package(
    package: str,
    roots: Sequence[str] = (),
    width: int = DEFAULT_PACKAGE_WIDTH,
) -> str:
    """Strip the longest matching module root from ``package`` and fit it to ``width``.

    Args:
        package: Full package import path.
        roots: Module paths to strip (e.g. from go.mod). Empty leaves the path as is.
        width: Maximum length; longer names keep their left side.

    Returns:
        The display name for the package column.
    """
    name = package
    for root in sorted((r.rstrip("/") for r in roots if r.strip("/")), key=len, reverse=True):
        if package == root:
            name = "."
            break
        if package.startswith(root + "/"):
            name = package[len(root) + 1 :]
            break
    return name[:width]


# ── Table ────────────────────────────────────────────────────────


def _table_line(name: str, before: str, after: str, delta: str, *, width: int, right: bool) -> str:
    name_col = f"{name:>{width}}" if right else f"{name:<{width}}"
    return (
        f"{name_col} {before:>{_VALUE_WIDTH}} {after:>{_VALUE_WIDTH}} {delta:>{_VALUE_WIDTH}}"
    )


def build_table(
    diff: CoverageDiff,
    *,
    roots: Sequence[str] = (),
    hide_unchanged: bool = True,
    width: int = DEFAULT_PACKAGE_WIDTH,
) -> str:
    """Render ``diff`` as a fixed-width text table.

    Args:
        diff: Comparison produced by ``diff_profiles``.
        roots: Module roots stripped from package names.
        hide_unchanged: Leave the delta column empty for packages whose coverage
            did not move. The totals row always shows its delta.
        width: Width of the package column.

    Returns:
        The table lines joined by newlines, without a trailing newline.
    """
    lines = [
        _table_line("package", "before", "after", "delta", width=width, right=False),
        _table_line(_RULE, _RULE, _RULE, _RULE, width=width, right=False),
    ]
    lines.extend(
        _table_line(
            relative_package(row.identifier, roots, width),
            format_coverage(row.base),
            format_coverage(row.head),
            format_delta(row, hide_unchanged=hide_unchanged),
            width=width,
            right=False,
        )
        for row in diff.rows
    )
    lines.append(
        _table_line(
            diff.total.identifier,
            format_coverage(diff.total.base),
            format_coverage(diff.total.head),
            format_delta(diff.total),
            width=width,
            right=True,
        )
    )
    return "\n".join(lines)


def summarize(base: int | None, head: int | None) -> str:
    """Return a one-line description of the overall coverage change.

    A side without data counts as 0.00% once the other side has data.
    """
    if base == head:
        return SUMMARY_UNCHANGED
    delta = (head or 0) - (base or 0)
    if delta == 0:
        return SUMMARY_UNCHANGED
    amount = _format_points(abs(delta))
    if delta < 0:
        return SUMMARY_DECREASED.format(amount=amount)
    return SUMMARY_INCREASED.format(amount=amount)


def diff_to_dict(diff: CoverageDiff, roots: Sequence[str] = ()) -> dict[str, Any]:
    """Return a JSON-serializable view of ``diff``."""

    def _row(row: DeltaRow, name: str) -> dict[str, Any]:
        return {
            "package": name,
            "before": format_coverage(row.base),
            "after": format_coverage(row.head),
            "delta": format_delta(row),
            "status": row.status.value,
        }

    return {
        "summary": summarize(diff.total.base, diff.total.head),
        "packages": [
            _row(row, relative_package(row.identifier, roots, len(row.identifier)))
            for row in diff.rows
        ],
        "total": _row(diff.total, diff.total.identifier),
    }
