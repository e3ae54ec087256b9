"""Sequential execution of a single request chain."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from chainload.core.models import ChainResult, StepOutcome, WeightedChain
from chainload.core.outcome import Fetcher, fetch_outcome

logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


class ChainRunner:
    """Run the steps of one chain strictly in order.

    Each step waits for its fetch to resolve and then for its post-fetch
    delay before the next step starts. A failing step does not stop the
    chain; every step always runs and contributes one outcome.

    Example:
        >>> runner = ChainRunner(fetcher)
        >>> result = await runner.run(0.5, chain)
        >>> [str(o) for o in result.outcomes]
        ['Success', 'Timeout']
    """

    def __init__(self, fetcher: Fetcher, sleep: SleepFunc | None = None) -> None:
        """Initialize the runner.

        Args:
            fetcher: Performs the fetch for each step.
            sleep: Coroutine used for the start and post-fetch delays
                (default: asyncio.sleep).
        """
        self.fetcher = fetcher
        self._sleep = sleep or asyncio.sleep

    async def run(self, start_delay: float, chain: WeightedChain) -> ChainResult:
        """Execute ``chain`` once after waiting ``start_delay`` seconds.

        Args:
            start_delay: Seconds to wait before the first step.
            chain: The chain to execute.

        Returns:
            ChainResult with one outcome per step, in step order.
        """
        await self._sleep(start_delay)

        outcomes: list[StepOutcome] = []
        for step in chain.steps:
            outcomes.append(await fetch_outcome(self.fetcher, step.url))
            await self._sleep(step.delay)

        return ChainResult(name=chain.name, outcomes=tuple(outcomes), start_delay=start_delay)
