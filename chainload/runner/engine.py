"""Orchestration of a complete load run.

``LoadRunner`` opens a fetcher, hands the plan to a ``Scheduler``, waits for
every chain and aggregates what came back.

Example:
    >>> from chainload.config import load_plan, load_settings
    >>> from chainload.runner import LoadRunner
    >>>
    >>> runner = LoadRunner(load_settings(timeout=10))
    >>> result = runner.run(load_plan("plan.yml"))
    >>> for stats in result.statistics.values():
    ...     print(stats.name, stats.mean, stats.failed)
"""

from __future__ import annotations

import asyncio
import logging
import random
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from chainload.config.settings import LoadSettings
from chainload.core.models import ChainResult, GroupedResults, GroupStatistics, LoadPlan
from chainload.http.fetcher import HttpFetcher
from chainload.observability.logging import log_context
from chainload.runner.scheduler import ProgressCallback, Scheduler
from chainload.stats.aggregator import aggregate_grouped, group_results

logger = logging.getLogger(__name__)

FetcherFactory = Callable[[LoadSettings], Any]


def default_fetcher_factory(settings: LoadSettings) -> HttpFetcher:
    return HttpFetcher(
        timeout=settings.timeout,
        follow_redirects=settings.follow_redirects,
        reject_error_status=settings.reject_error_status,
        user_agent=settings.user_agent,
    )


@dataclass
class LoadRunResult:
    """Everything produced by one load run.

    Attributes:
        plan: The plan that was run.
        results: One ChainResult per draw, in draw order.
        grouped: Results bucketed by chain name.
        statistics: Per-group statistics.
        started_at: When the chains were launched.
        finished_at: When the last chain finished.
        run_id: Short identifier attached to the run's log records.
    """

    plan: LoadPlan
    results: list[ChainResult]
    grouped: GroupedResults
    statistics: dict[str, GroupStatistics]
    started_at: datetime
    finished_at: datetime = field(default_factory=datetime.now)
    run_id: str = ""

    @property
    def duration_seconds(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()

    @property
    def total_chains(self) -> int:
        return len(self.results)

    @property
    def failed_chains(self) -> int:
        return sum(stats.failed for stats in self.statistics.values())


class LoadRunner:
    """Run load plans with a given set of settings.

    Attributes:
        settings: Network and scheduling settings.
    """

    def __init__(
        self,
        settings: LoadSettings | None = None,
        fetcher_factory: FetcherFactory | None = None,
        rng: random.Random | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            settings: Settings to use (default: from the environment).
            fetcher_factory: Builds the fetcher from the settings. The result
                must be an async context manager with a ``fetch`` coroutine.
            rng: Random source. Defaults to ``random.Random(settings.seed)``.
            progress_callback: Optional callback(completed, total).
        """
        self.settings = settings or LoadSettings()
        self.fetcher_factory = fetcher_factory or default_fetcher_factory
        self.rng = rng or random.Random(self.settings.seed)
        self.progress_callback = progress_callback

    async def run_async(self, plan: LoadPlan) -> LoadRunResult:
        """Run ``plan`` on the current event loop.

        Args:
            plan: The load plan.

        Returns:
            LoadRunResult with raw, grouped and aggregated results.
        """
        run_id = uuid.uuid4().hex[:12]
        with log_context(run_id=run_id):
            logger.info(
                f"Starting load run: {plan.number_of_requests} chain(s) from "
                f"{len(plan.chains)} definition(s) over {plan.duration}s"
            )
            started_at = datetime.now()

            async with self.fetcher_factory(self.settings) as fetcher:
                scheduler = Scheduler(
                    fetcher,
                    rng=self.rng,
                    max_concurrency=self.settings.max_concurrency,
                    progress_callback=self.progress_callback,
                )
                results = await scheduler.run(plan)

            grouped = group_results(results)
            result = LoadRunResult(
                plan=plan,
                results=results,
                grouped=grouped,
                statistics=aggregate_grouped(grouped),
                started_at=started_at,
                finished_at=datetime.now(),
                run_id=run_id,
            )

            logger.info(
                f"Load run completed in {result.duration_seconds:.2f}s: "
                f"{result.total_chains - result.failed_chains}/{result.total_chains} "
                "chain(s) succeeded"
            )
        return result

    def run(self, plan: LoadPlan) -> LoadRunResult:
        """Run ``plan`` to completion on a new event loop."""
        return asyncio.run(self.run_async(plan))
