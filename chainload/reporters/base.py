"""Abstract base reporter class for chainload.

Reporters turn a ``LoadRunResult`` into an output format. Two are shipped:
a structured JSON dump of the grouped raw results and a fixed-width text
table of the per-group statistics.

Example:
    >>> class CsvReporter(BaseReporter):
    ...     @property
    ...     def file_extension(self) -> str:
    ...         return ".csv"
    ...
    ...     def generate(self, result: LoadRunResult) -> str:
    ...         return "name,total\\n" + ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chainload.runner.engine import LoadRunResult


class BaseReporter(ABC):
    """Abstract base class for all reporters.

    Attributes:
        output_path: Optional default path for saving reports.
    """

    def __init__(self, output_path: str | Path | None = None) -> None:
        """Initialize the reporter with an optional output path.

        Args:
            output_path: Default path where reports will be saved. Can be
                overridden when calling save().
        """
        self.output_path = Path(output_path) if output_path else None

    @abstractmethod
    def generate(self, result: LoadRunResult) -> str:
        """Generate a report from a load run.

        Args:
            result: The completed load run. May contain no chains at all.

        Returns:
            The report text.
        """
        ...

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for this reporter's output, including the dot."""
        ...

    def save(self, result: LoadRunResult, path: str | Path | None = None) -> Path:
        """Save the generated report to a file.

        Creates parent directories if they don't exist.

        Args:
            result: The load run to report on.
            path: Where to write. Uses output_path if not provided.

        Returns:
            Path of the written report.

        Raises:
            ValueError: If no path is given and none was set in the constructor.
        """
        output_path = Path(path) if path else self.output_path
        if not output_path:
            raise ValueError(
                "Output path required for saving report. "
                "Provide 'path' argument or set 'output_path' in constructor."
            )

        content = self.generate(result)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(content)

        return output_path
