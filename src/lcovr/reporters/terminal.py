"""Terminal reporter with rich output formatting."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from lcovr.models.coverage import CoverageReport

console = Console()

_HIGH_COVERAGE = 80.0
_MEDIUM_COVERAGE = 50.0


class CLIReporter:
    """Rich terminal output reporter for conversion runs."""

    def __init__(self) -> None:
        """Initialize the CLI reporter."""
        self.console = console

    def print_header(self, title: str) -> None:
        """Print a bold header."""
        self.console.print(f"\n[bold cyan]{title}[/bold cyan]\n")

    def print_success(self, message: str) -> None:
        """Print a success message."""
        self.console.print(f"[green]✓[/green] {message}")

    def print_error(self, message: str) -> None:
        """Print an error message."""
        self.console.print(f"[red]✗[/red] {message}")

    def print_info(self, message: str) -> None:
        """Print an info message."""
        self.console.print(f"[dim]{message}[/dim]")

    def print_coverage_summary(self, report: CoverageReport) -> None:
        """Print a per-package line coverage table."""
        table = Table(title="Coverage Summary", title_style="bold cyan")
        table.add_column("Package", style="bold")
        table.add_column("Classes", justify="right")
        table.add_column("Lines", justify="right")
        table.add_column("Line Coverage", justify="right")

        for group in report.sorted_packages():
            line_pct = group.line_rate * 100
            color = self._get_coverage_color(line_pct)
            table.add_row(
                escape(group.name) if group.name else "(default)",
                str(len(group.records)),
                f"{group.lines_hit}/{group.lines_found}",
                f"[{color}]{line_pct:.1f}%[/{color}]",
            )

        overall = report.line_rate * 100
        color = self._get_coverage_color(overall)
        table.add_section()
        table.add_row(
            "[bold]Overall[/bold]",
            str(report.record_count),
            f"{report.lines_hit}/{report.lines_found}",
            f"[bold {color}]{overall:.1f}%[/bold {color}]",
        )

        self.console.print(table)

    def _get_coverage_color(self, percentage: float) -> str:
        """Get a color based on coverage percentage."""
        if percentage >= _HIGH_COVERAGE:
            return "green"
        if percentage >= _MEDIUM_COVERAGE:
            return "yellow"
        return "red"


reporter = CLIReporter()
