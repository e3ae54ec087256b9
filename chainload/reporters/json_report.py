"""JSON reporter for machine-readable load-run output.

The report holds the plan that was run, every chain execution grouped by
chain name (start delay plus per-step outcomes) and the per-group
statistics. Missing statistics are written as ``null``.

Example:
    >>> reporter = JSONReporter(indent=4)
    >>> data = json.loads(reporter.generate(result))
    >>> data["groups"]["homepage"][0]["outcomes"][0]["kind"]
    'success'
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from chainload import __version__
from chainload.reporters.base import BaseReporter

if TYPE_CHECKING:
    from chainload.runner.engine import LoadRunResult


class JSONReporter(BaseReporter):
    """Generate JSON reports for programmatic consumption.

    Attributes:
        output_path: Optional default path for saving reports.
        indent: Number of spaces for JSON indentation (default: 2).
        include_statistics: Whether to add the aggregated statistics next to
            the raw grouped results.
    """

    @property
    def file_extension(self) -> str:
        return ".json"

    def __init__(
        self,
        output_path: str | Path | None = None,
        indent: int | None = 2,
        include_statistics: bool = True,
    ) -> None:
        super().__init__(output_path)
        self.indent = indent
        self.include_statistics = include_statistics

    def generate(self, result: LoadRunResult) -> str:
        """Generate a JSON report.

        Args:
            result: The completed load run.

        Returns:
            JSON-formatted report string.
        """
        return json.dumps(self.build_report(result), indent=self.indent, default=self._json_serializer)

    def build_report(self, result: LoadRunResult) -> dict[str, Any]:
        report: dict[str, Any] = {
            "report": {
                "generated_at": datetime.now().isoformat(),
                "version": __version__,
            },
            "run": {
                "run_id": result.run_id,
                "started_at": result.started_at,
                "finished_at": result.finished_at,
                "duration_s": round(result.duration_seconds, 3),
                "total_chains": result.total_chains,
                "failed_chains": result.failed_chains,
            },
            "plan": result.plan.to_dict(),
            "groups": {
                name: [chain.to_dict() for chain in chains]
                for name, chains in result.grouped.items()
            },
        }
        if self.include_statistics:
            report["statistics"] = {
                name: stats.to_dict() for name, stats in result.statistics.items()
            }
        return report

    @staticmethod
    def _json_serializer(obj: Any) -> Any:
        if isinstance(obj, datetime):
            return obj.isoformat()
        raise TypeError(f"Object of type {type(obj)} is not JSON serializable")
