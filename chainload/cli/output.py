"""Rich console output for the chainload CLI.

Everything here is console chrome: headers, the plan overview, the progress
bar and the closing summary panel. It is written to stderr so that reports
printed to stdout stay machine readable.

Example:
    >>> output = CLIOutput()
    >>> output.plan_overview(plan)
    >>> with output.progress(plan.number_of_requests) as callback:
    ...     result = LoadRunner(settings, progress_callback=callback).run(plan)
    >>> output.run_summary(result)
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from chainload.core.models import LoadPlan
from chainload.errors import ChainloadError
from chainload.runner.scheduler import ProgressCallback

if TYPE_CHECKING:
    from chainload.runner.engine import LoadRunResult


@dataclass
class OutputConfig:
    """Configuration for CLI output."""

    show_progress: bool = True
    use_colors: bool = True
    use_unicode: bool = True


class CLIOutput:
    """Console output handler for the CLI.

    Attributes:
        config: OutputConfig controlling output behavior.
        console: Rich Console instance for output.
    """

    SYMBOLS = {
        "check": "✓",
        "cross": "✗",
        "warning": "⚠",
        "info": "ℹ",
        "bullet": "•",
    }

    ASCII_SYMBOLS = {
        "check": "[OK]",
        "cross": "[FAIL]",
        "warning": "[!]",
        "info": "[i]",
        "bullet": "*",
    }

    def __init__(self, config: OutputConfig | None = None, console: Console | None = None) -> None:
        self.config = config or OutputConfig()
        self.console = console or Console(
            stderr=True,
            no_color=not self.config.use_colors,
        )
        self._use_unicode = self.config.use_unicode and self._supports_unicode()

    def _supports_unicode(self) -> bool:
        encoding = getattr(sys.stderr, "encoding", None)
        return encoding is not None and "utf" in encoding.lower()

    def _symbol(self, name: str) -> str:
        symbols = self.SYMBOLS if self._use_unicode else self.ASCII_SYMBOLS
        return symbols.get(name, name)

    def header(self, text: str) -> None:
        """Display a section header."""
        self.console.print()
        self.console.rule(f"[bold]{text}[/bold]", style="blue")
        self.console.print()

    def info(self, message: str) -> None:
        self.console.print(f"[blue]{self._symbol('info')}[/blue] {message}")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]{self._symbol('warning')}[/yellow] {message}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]{self._symbol('cross')}[/red] {message}")

    def success(self, message: str) -> None:
        self.console.print(f"[green]{self._symbol('check')}[/green] {message}")

    def show_error(self, error: ChainloadError) -> None:
        """Display an error with its individual problems and suggestions."""
        self.error(f"[bold]{escape(error.message)}[/bold] [dim]({error.error_code.value})[/dim]")
        for problem in getattr(error, "problems", []):
            self.console.print(f"    {self._symbol('bullet')} {problem}", markup=False)
        if error.suggestions:
            self.console.print()
            self.console.print("  [bold]Suggestions:[/bold]")
            for suggestion in error.suggestions:
                self.console.print(f"    {self._symbol('bullet')} {suggestion}", markup=False)

    def plan_overview(self, plan: LoadPlan) -> None:
        """Display the chains of a plan with their share of the draws."""
        table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
        table.add_column("Chain", min_width=16)
        table.add_column("Proportion", justify="right")
        table.add_column("Share", justify="right")
        table.add_column("Steps", justify="right")
        table.add_column("First URL", overflow="fold")

        total_weight = plan.total_weight
        for chain in plan.chains:
            share = chain.proportion / total_weight * 100
            table.add_row(
                chain.name,
                str(chain.proportion),
                f"{share:.1f}%",
                str(len(chain.steps)),
                chain.steps[0].url,
            )

        self.console.print(table)
        self.console.print()
        self.info(
            f"{plan.number_of_requests} chain execution(s) smeared over "
            f"{plan.duration:g}s"
        )

    @contextmanager
    def progress(self, total: int) -> Iterator[ProgressCallback | None]:
        """Show a progress bar while chains complete.

        Yields:
            A callback(completed, total) to hand to the runner, or None when
            progress display is disabled.
        """
        if not self.config.show_progress or total == 0:
            yield None
            return

        progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold]chains[/bold]"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        )
        task = progress.add_task("chains", total=total)

        def callback(completed: int, _total: int) -> None:
            progress.update(task, completed=completed)

        with progress:
            yield callback

    def run_summary(self, result: LoadRunResult) -> None:
        """Display the closing summary panel of a run."""
        total = result.total_chains
        failed = result.failed_chains
        passed = total - failed

        summary = Table.grid(padding=(0, 3))
        summary.add_column(style="bold", width=18)
        summary.add_column()

        rate = (passed / total * 100) if total > 0 else 100.0
        rate_color = "green" if rate >= 90 else "yellow" if rate >= 70 else "red"

        summary.add_row("Chains:", f"[cyan]{total}[/cyan]")
        summary.add_row("Succeeded:", f"[green]{passed}[/green]")
        summary.add_row("Failed:", f"[red]{failed}[/red]")
        summary.add_row("Success Rate:", f"[{rate_color}]{rate:.1f}%[/{rate_color}]")
        summary.add_row("Wall Time:", f"[cyan]{result.duration_seconds:.2f}s[/cyan]")

        status_color = "green" if failed == 0 else "red"
        status_symbol = self._symbol("check") if failed == 0 else self._symbol("cross")
        status_text = "ALL CHAINS SUCCEEDED" if failed == 0 else "SOME CHAINS FAILED"

        self.console.print()
        self.console.print(
            Panel(
                summary,
                title=f"[bold]{status_symbol} {status_text}[/bold]",
                border_style=status_color,
                padding=(1, 2),
            )
        )


def create_output(show_progress: bool = True, use_colors: bool = True) -> CLIOutput:
    """Create a CLIOutput with the given display options."""
    return CLIOutput(OutputConfig(show_progress=show_progress, use_colors=use_colors))
