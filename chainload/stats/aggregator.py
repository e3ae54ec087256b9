"""Grouping, chain reduction and per-group statistics.

Results are bucketed by the name of the chain they were drawn from. Each
chain execution is reduced to a single outcome: ``Success`` with the summed
elapsed time when every step succeeded, otherwise the first failing step's
outcome. Statistics are then computed over the reduced outcomes of each
group.

Nothing here depends on the order results arrive in, and no input is
mutated.

Example:
    >>> statistics = aggregate(results)
    >>> statistics["homepage"].mean
    0.231
"""

from __future__ import annotations

import statistics
from collections import Counter
from collections.abc import Iterable, Sequence

from chainload.core.models import ChainResult, GroupedResults, GroupStatistics, StepOutcome

COMMON_ERROR_LIMIT = 2


def group_results(results: Iterable[ChainResult]) -> GroupedResults:
    """Bucket chain results by chain name.

    Args:
        results: Chain results in any order.

    Returns:
        Mapping from chain name to the results drawn from chains with that
        name. Only names with at least one result appear.
    """
    grouped: GroupedResults = {}
    for result in results:
        grouped.setdefault(result.name, []).append(result)
    return grouped


def reduce_chain(result: ChainResult) -> StepOutcome:
    """Reduce a chain's step outcomes to one outcome.

    Args:
        result: The chain result to reduce.

    Returns:
        ``Success`` whose elapsed is the sum of every step's elapsed time
        (the url is left empty) if all steps succeeded, otherwise the first
        non-success outcome in step order.
    """
    total = 0.0
    for outcome in result.outcomes:
        if not outcome.is_success:
            return outcome
        total += outcome.elapsed or 0.0
    return StepOutcome.success(total)


def rank_errors(outcomes: Iterable[StepOutcome], limit: int = COMMON_ERROR_LIMIT) -> list[StepOutcome]:
    """Most frequent distinct failure outcomes, most frequent first.

    Outcomes with equal frequency come back in no particular order.
    """
    counts = Counter(outcome for outcome in outcomes if not outcome.is_success)
    return [outcome for outcome, _ in counts.most_common(limit)]


def compute_statistics(name: str, chains: Sequence[ChainResult]) -> GroupStatistics:
    """Compute statistics for one group of chain results.

    Args:
        name: The group name.
        chains: Every chain result of the group.

    Returns:
        GroupStatistics. ``mean`` and ``standard_deviation`` (population) are
        ``None`` when no chain succeeded.
    """
    reduced = [reduce_chain(chain) for chain in chains]
    elapsed = [outcome.elapsed or 0.0 for outcome in reduced if outcome.is_success]

    mean: float | None = None
    std_dev: float | None = None
    if elapsed:
        mean = statistics.fmean(elapsed)
        std_dev = statistics.pstdev(elapsed, mu=mean)

    return GroupStatistics(
        name=name,
        total=len(reduced),
        successful=len(elapsed),
        mean=mean,
        standard_deviation=std_dev,
        failed=len(reduced) - len(elapsed),
        common_errors=tuple(rank_errors(reduced)),
    )


def aggregate_grouped(grouped: GroupedResults) -> dict[str, GroupStatistics]:
    """Compute statistics for every group of an already grouped result set."""
    return {name: compute_statistics(name, chains) for name, chains in grouped.items()}


def aggregate(results: Iterable[ChainResult]) -> dict[str, GroupStatistics]:
    """Group chain results by name and compute statistics for each group."""
    return aggregate_grouped(group_results(results))
