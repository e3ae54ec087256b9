"""Fixed-width text table of per-group statistics."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from chainload.core.models import GroupStatistics
from chainload.reporters.base import BaseReporter

if TYPE_CHECKING:
    from chainload.runner.engine import LoadRunResult

NO_DATA = "n/a"


def format_seconds(value: float | None, precision: int = 4) -> str:
    """Format a statistic in seconds, or the no-data marker when it is missing."""
    if value is None:
        return NO_DATA
    return f"{value:.{precision}f}"


def truncate(text: str, width: int) -> str:
    if len(text) <= width:
        return text
    return text[: width - 3] + "..."


class TableReporter(BaseReporter):
    """Render statistics as a plain text table with fixed column widths.

    Columns: name, total, mean (s), std dev (s), failed, common errors.
    Names longer than ``name_width`` are truncated. Groups without a single
    successful chain show ``n/a`` for mean and standard deviation.

    Example:
        >>> print(TableReporter().generate(result))
        name                    total     mean (s)  std dev (s)   failed  common errors
        homepage                    6       0.2311       0.0120        1  Timeout
    """

    name_width = 22
    count_width = 7
    seconds_width = 12

    def __init__(self, output_path: str | Path | None = None, precision: int = 4) -> None:
        super().__init__(output_path)
        self.precision = precision

    @property
    def file_extension(self) -> str:
        return ".txt"

    def generate(self, result: LoadRunResult) -> str:
        return self.render(result.statistics.values())

    def header(self) -> str:
        return self._row("name", "total", "mean (s)", "std dev (s)", "failed", "common errors")

    def render(self, statistics: Iterable[GroupStatistics]) -> str:
        """Render an iterable of GroupStatistics, one row per group."""
        lines = [self.header()]
        lines.extend(self.format_row(stats) for stats in statistics)
        return "\n".join(lines) + "\n"

    def format_row(self, stats: GroupStatistics) -> str:
        return self._row(
            stats.name,
            str(stats.total),
            format_seconds(stats.mean, self.precision),
            format_seconds(stats.standard_deviation, self.precision),
            str(stats.failed),
            ", ".join(str(error) for error in stats.common_errors),
        )

    def _row(
        self,
        name: str,
        total: str,
        mean: str,
        std_dev: str,
        failed: str,
        errors: str,
    ) -> str:
        return (
            f"{truncate(name, self.name_width):<{self.name_width}} "
            f"{total:>{self.count_width}} "
            f"{mean:>{self.seconds_width}} "
            f"{std_dev:>{self.seconds_width}} "
            f"{failed:>{self.count_width}}  "
            f"{errors}"
        ).rstrip()
