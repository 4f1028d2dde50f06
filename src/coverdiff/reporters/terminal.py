"""Terminal reporter with rich output formatting."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from coverdiff.analyzers.delta import DeltaStatus
from coverdiff.reporters.table import format_coverage, format_delta, relative_package, summarize

if TYPE_CHECKING:
    from collections.abc import Sequence

    from coverdiff.analyzers.delta import CoverageDiff
    from coverdiff.models.coverage import Profile

console = Console()

_GOOD_COVERAGE = 8000
_FAIR_COVERAGE = 5000

_STATUS_COLORS = {
    DeltaStatus.IMPROVED: "green",
    DeltaStatus.REGRESSED: "red",
    DeltaStatus.NEW: "cyan",
    DeltaStatus.REMOVED: "yellow",
    DeltaStatus.UNCHANGED: "dim",
    DeltaStatus.NO_DATA: "dim",
}


def _coverage_color(basis_points: int | None) -> str:
    """Return a Rich color name for a coverage value."""
    if basis_points is None:
        return "dim"
    if basis_points >= _GOOD_COVERAGE:
        return "green"
    if basis_points >= _FAIR_COVERAGE:
        return "yellow"
    return "red"


def _colored(text: str, color: str) -> str:
    return f"[{color}]{text}[/{color}]"


class CLIReporter:
    """Rich terminal output for coverage profiles and deltas."""

    def __init__(self) -> None:
        """Initialize the CLI reporter."""
        self.console = console

    def print_success(self, message: str) -> None:
        """Print a success message."""
        self.console.print(f"[green]✓[/green] {message}")

    def print_error(self, message: str) -> None:
        """Print an error message."""
        self.console.print(f"[red]✗[/red] {message}")

    def print_coverage_diff(
        self,
        diff: CoverageDiff,
        roots: Sequence[str] = (),
        *,
        hide_unchanged: bool = True,
    ) -> None:
        """Print a coloured coverage delta table followed by the summary line."""
        changed = len(diff.changed_rows())
        table = Table(
            title="Coverage Diff",
            title_style="bold cyan",
            caption=f"{changed} of {len(diff.rows)} packages changed",
        )
        table.add_column("Package", style="bold")
        table.add_column("Before", justify="right")
        table.add_column("After", justify="right")
        table.add_column("Delta", justify="right")

        for row in diff.rows:
            table.add_row(
                relative_package(row.identifier, roots, len(row.identifier)),
                _colored(format_coverage(row.base), _coverage_color(row.base)),
                _colored(format_coverage(row.head), _coverage_color(row.head)),
                _colored(
                    format_delta(row, hide_unchanged=hide_unchanged),
                    _STATUS_COLORS[row.status],
                ),
            )

        total = diff.total
        table.add_section()
        table.add_row(
            "[bold]Total[/bold]",
            _colored(format_coverage(total.base), f"bold {_coverage_color(total.base)}"),
            _colored(format_coverage(total.head), f"bold {_coverage_color(total.head)}"),
            _colored(format_delta(total), f"bold {_STATUS_COLORS[total.status]}"),
        )

        self.console.print(table)
        self.console.print(
            _colored(summarize(total.base, total.head), _STATUS_COLORS[total.status])
        )

    def print_profile_summary(self, profile: Profile, *, files: bool = False) -> None:
        """Print per-package (and optionally per-file) coverage of one profile."""
        table = Table(title=f"Coverage ({profile.mode or 'unknown'} mode)", title_style="bold cyan")
        table.add_column("Package", style="bold")
        table.add_column("Statements", justify="right")
        table.add_column("Covered", justify="right")
        table.add_column("Coverage", justify="right")

        for name in sorted(profile.packages):
            pkg = profile.packages[name]
            points = pkg.basis_points
            table.add_row(
                name,
                str(pkg.total_statements),
                str(pkg.covered_statements),
                _colored(format_coverage(points), _coverage_color(points)),
            )
            if not files:
                continue
            for file_cov in pkg.files().values():
                file_points = file_cov.basis_points
                table.add_row(
                    f"  [dim]{file_cov.file_name}[/dim]",
                    str(file_cov.total_statements),
                    str(file_cov.covered_statements),
                    _colored(format_coverage(file_points), _coverage_color(file_points)),
                )

        points = profile.basis_points
        table.add_section()
        table.add_row(
            "[bold]Total[/bold]",
            str(profile.total_statements),
            str(profile.covered_statements),
            _colored(format_coverage(points), f"bold {_coverage_color(points)}"),
        )
        self.console.print(table)


# Singleton instance for easy import
reporter = CLIReporter()
