"""Weighted sampling and concurrent launch of chain executions.

Scheduling happens in three steps:

1. ``expand_population`` repeats every chain ``proportion`` times, so a
   uniform draw over the population selects each chain with probability
   ``proportion / sum(proportions)``.
2. ``draw_schedule`` draws ``number_of_requests`` independent samples, each a
   start delay uniform in ``[0, duration)`` and a uniform population index.
3. ``Scheduler.run`` launches one task per sample and returns only once every
   task has completed.

The random source is injectable. Without one, a fresh unseeded
``random.Random`` is used, so repeated runs of the same plan produce
different schedules with the same distribution.

Example:
    >>> scheduler = Scheduler(fetcher, rng=random.Random(42))
    >>> results = await scheduler.run(plan)
    >>> len(results) == plan.number_of_requests
    True
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from chainload.core.models import ChainResult, LoadPlan, WeightedChain
from chainload.core.outcome import Fetcher
from chainload.errors import ConfigurationError
from chainload.runner.chain import ChainRunner, SleepFunc

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class ScheduledChain:
    """One sample draw: which chain to run and when to start it.

    Attributes:
        start_delay: Seconds after launch before the chain starts.
        chain: The chain drawn from the population.
    """

    start_delay: float
    chain: WeightedChain


def expand_population(chains: Sequence[WeightedChain]) -> list[WeightedChain]:
    """Repeat each chain according to its weight.

    Args:
        chains: The weighted chains of a plan.

    Returns:
        A list of length ``sum(chain.proportion)`` in which each chain
        appears ``proportion`` times.

    Raises:
        ConfigurationError: If the population would be empty.
    """
    population = [chain for chain in chains for _ in range(chain.proportion)]
    if not population:
        raise ConfigurationError("Cannot schedule a load plan without chains")
    return population


def draw_schedule(plan: LoadPlan, rng: random.Random | None = None) -> list[ScheduledChain]:
    """Draw the start delay and chain of every execution in a plan.

    Every draw is independent and identically distributed. With a zero
    duration all start delays are exactly 0.

    Args:
        plan: The load plan to sample.
        rng: Random source (default: a new unseeded ``random.Random``).

    Returns:
        ``plan.number_of_requests`` scheduled chains, in draw order.
    """
    rng = rng or random.Random()
    population = expand_population(plan.chains)
    return [
        ScheduledChain(
            start_delay=rng.random() * plan.duration,
            chain=population[rng.randrange(len(population))],
        )
        for _ in range(plan.number_of_requests)
    ]


class Scheduler:
    """Launch every scheduled chain concurrently and wait for all of them.

    By default nothing limits how many chains run at once. When
    ``max_concurrency`` is set, chains that have finished their start delay
    wait on a semaphore before executing their steps.

    Attributes:
        fetcher: Fetcher shared by every chain.
        max_concurrency: Optional ceiling on chains executing at once.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        rng: random.Random | None = None,
        max_concurrency: int | None = None,
        sleep: SleepFunc | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            fetcher: Fetcher shared by every chain.
            rng: Random source for the draws (default: unseeded).
            max_concurrency: Optional ceiling on concurrently executing chains.
            sleep: Sleep coroutine passed to each ChainRunner.
            progress_callback: Optional callback(completed, total) invoked as
                chains finish.
        """
        if max_concurrency is not None and max_concurrency < 1:
            raise ConfigurationError(f"max_concurrency must be >= 1, got {max_concurrency}")

        self.fetcher = fetcher
        self.rng = rng or random.Random()
        self.max_concurrency = max_concurrency
        self.progress_callback = progress_callback
        self._sleep = sleep or asyncio.sleep

    def schedule(self, plan: LoadPlan) -> list[ScheduledChain]:
        """Draw the schedule for ``plan`` using this scheduler's random source."""
        return draw_schedule(plan, self.rng)

    async def run(self, plan: LoadPlan) -> list[ChainResult]:
        """Draw a schedule for ``plan`` and execute it.

        Args:
            plan: The load plan to run.

        Returns:
            One ChainResult per draw, in draw order.
        """
        return await self.execute(self.schedule(plan))

    async def execute(self, schedule: Sequence[ScheduledChain]) -> list[ChainResult]:
        """Execute an already drawn schedule.

        All chains are launched at once and gathered behind a single barrier;
        no result is returned before every chain has finished.

        Args:
            schedule: The draws to execute.

        Returns:
            One ChainResult per scheduled chain, in schedule order.
        """
        total = len(schedule)
        if total == 0:
            return []

        runner = ChainRunner(self.fetcher, sleep=self._sleep)
        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None
        completed = 0

        async def run_one(item: ScheduledChain) -> ChainResult:
            nonlocal completed
            if semaphore is None:
                result = await runner.run(item.start_delay, item.chain)
            else:
                await self._sleep(item.start_delay)
                async with semaphore:
                    result = await runner.run(0.0, item.chain)
                result = ChainResult(result.name, result.outcomes, item.start_delay)
            completed += 1
            if self.progress_callback:
                self.progress_callback(completed, total)
            return result

        logger.debug(
            f"Launching {total} chain(s)"
            + (f" with max_concurrency={self.max_concurrency}" if semaphore else "")
        )
        return list(await asyncio.gather(*(run_one(item) for item in schedule)))
