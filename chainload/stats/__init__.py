"""Aggregation of chain results into per-group statistics."""

from chainload.stats.aggregator import (
    COMMON_ERROR_LIMIT,
    aggregate,
    aggregate_grouped,
    compute_statistics,
    group_results,
    rank_errors,
    reduce_chain,
)

__all__ = [
    "COMMON_ERROR_LIMIT",
    "aggregate",
    "aggregate_grouped",
    "compute_statistics",
    "group_results",
    "rank_errors",
    "reduce_chain",
]
