"""Core models and outcome classification."""

from chainload.core.models import (
    ChainResult,
    GroupedResults,
    GroupStatistics,
    LoadPlan,
    OutcomeKind,
    RequestStep,
    StepOutcome,
    WeightedChain,
    validate_absolute_url,
)
from chainload.core.outcome import (
    Fetcher,
    FetchSuccess,
    classify,
    classify_failure,
    fetch_outcome,
)

__all__ = [
    "ChainResult",
    "GroupedResults",
    "GroupStatistics",
    "LoadPlan",
    "OutcomeKind",
    "RequestStep",
    "StepOutcome",
    "WeightedChain",
    "validate_absolute_url",
    "Fetcher",
    "FetchSuccess",
    "classify",
    "classify_failure",
    "fetch_outcome",
]
