"""Rich output for the command line.

Everything goes to stderr: stdout may be carrying the XML report.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from gocover_cobertura.models.cobertura import Coverage, Package

console = Console(stderr=True)

# (minimum line rate, style), checked top-down
_RATE_STYLES = ((1.0, "green"), (0.8, "yellow"), (0.0, "red"))


def rate_style(rate: float) -> str:
    """Return the Rich style for a line rate in ``[0, 1]``."""
    for threshold, style in _RATE_STYLES:
        if rate >= threshold:
            return style
    return "red"


def _rate_cell(rate: float) -> str:
    style = rate_style(rate)
    return f"[{style}]{rate:.1%}[/{style}]"


def _package_row(pkg: Package) -> tuple[str, str, str, str]:
    return (
        pkg.name,
        str(len(pkg.classes)),
        f"{pkg.num_lines_with_hits}/{pkg.num_lines}",
        _rate_cell(pkg.line_rate),
    )


class CLIReporter:
    """Status lines and the coverage summary table."""

    def __init__(self, console_: Console | None = None) -> None:
        self.console = console_ or console

    def print_success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def print_error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {message}")

    def print_coverage_summary(self, coverage: Coverage) -> None:
        """Print one row per package and a total row."""
        table = Table(title="Coverage Summary", title_style="bold cyan")
        table.add_column("Package", style="bold")
        for header in ("Classes", "Lines", "Line Coverage"):
            table.add_column(header, justify="right")

        for pkg in coverage.packages:
            table.add_row(*_package_row(pkg))
        table.add_section()
        table.add_row(
            "Total",
            str(sum(len(pkg.classes) for pkg in coverage.packages)),
            f"{coverage.lines_covered}/{coverage.lines_valid}",
            _rate_cell(coverage.line_rate),
        )
        self.console.print(table)


reporter = CLIReporter()
