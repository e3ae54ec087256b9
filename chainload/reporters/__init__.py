"""Reporters for load-run results."""

from chainload.reporters.base import BaseReporter
from chainload.reporters.json_report import JSONReporter
from chainload.reporters.table import NO_DATA, TableReporter, format_seconds

REPORTERS: dict[str, type[BaseReporter]] = {
    "json": JSONReporter,
    "text": TableReporter,
}


def get_reporter(output_format: str) -> BaseReporter:
    """Create the reporter for an output format name ('text' or 'json')."""
    try:
        return REPORTERS[output_format]()
    except KeyError:
        raise ValueError(
            f"Unknown output format: {output_format}. Valid: {sorted(REPORTERS)}"
        ) from None


__all__ = [
    "BaseReporter",
    "JSONReporter",
    "TableReporter",
    "NO_DATA",
    "REPORTERS",
    "format_seconds",
    "get_reporter",
]
