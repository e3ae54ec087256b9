"""Tests for weighted sampling and concurrent chain launch."""

from __future__ import annotations

import asyncio
import random
from collections import Counter

import pytest

from chainload.core.models import LoadPlan
from chainload.errors import ConfigurationError
from chainload.runner.scheduler import ScheduledChain, Scheduler, draw_schedule, expand_population
from tests.conftest import FakeFetcher, RecordingSleep, make_chain


class TestExpandPopulation:
    """Tests for expand_population."""

    def test_size_is_sum_of_weights(self) -> None:
        a = make_chain("a", "https://example.com/a", proportion=1)
        b = make_chain("b", "https://example.com/b", proportion=3)

        population = expand_population([a, b])

        assert len(population) == 4
        assert population.count(a) == 1
        assert population.count(b) == 3

    def test_empty_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            expand_population([])


class TestDrawSchedule:
    """Tests for draw_schedule."""

    def test_draws_number_of_requests(self, sample_plan: LoadPlan, rng: random.Random) -> None:
        assert len(draw_schedule(sample_plan, rng)) == sample_plan.number_of_requests

    def test_zero_requests(self, sample_plan: LoadPlan) -> None:
        plan = LoadPlan(chains=sample_plan.chains, number_of_requests=0)
        assert draw_schedule(plan) == []

    def test_zero_duration_means_zero_delays(self, sample_plan: LoadPlan, rng: random.Random) -> None:
        assert all(item.start_delay == 0.0 for item in draw_schedule(sample_plan, rng))

    def test_delays_within_window(self, sample_plan: LoadPlan, rng: random.Random) -> None:
        plan = LoadPlan(chains=sample_plan.chains, number_of_requests=500, duration=2.5)
        delays = [item.start_delay for item in draw_schedule(plan, rng)]
        assert all(0.0 <= delay < 2.5 for delay in delays)
        assert max(delays) > 1.25

    def test_same_seed_same_schedule(self, sample_plan: LoadPlan) -> None:
        plan = LoadPlan(chains=sample_plan.chains, number_of_requests=20, duration=1.0)
        first = draw_schedule(plan, random.Random(7))
        second = draw_schedule(plan, random.Random(7))
        assert first == second

    def test_weights_respected(self, sample_plan: LoadPlan) -> None:
        plan = LoadPlan(chains=sample_plan.chains, number_of_requests=6000)
        counts = Counter(item.chain.name for item in draw_schedule(plan, random.Random(42)))

        ratio = counts["search"] / counts["homepage"]
        assert 1.8 < ratio < 2.2

    def test_single_chain_always_drawn(self) -> None:
        chain = make_chain("only", "https://example.com/")
        plan = LoadPlan(chains=(chain,), number_of_requests=10)
        assert {item.chain for item in draw_schedule(plan)} == {chain}


class TestScheduler:
    """Tests for Scheduler."""

    def test_invalid_max_concurrency(self, fake_fetcher: FakeFetcher) -> None:
        with pytest.raises(ConfigurationError, match="max_concurrency"):
            Scheduler(fake_fetcher, max_concurrency=0)

    @pytest.mark.asyncio
    async def test_one_result_per_draw(
        self, fake_fetcher: FakeFetcher, sample_plan: LoadPlan, rng: random.Random
    ) -> None:
        results = await Scheduler(fake_fetcher, rng=rng).run(sample_plan)

        assert len(results) == sample_plan.number_of_requests
        assert all(result.success for result in results)
        assert {result.name for result in results} <= {"homepage", "search"}

    @pytest.mark.asyncio
    async def test_results_match_schedule_order(
        self, fake_fetcher: FakeFetcher, recording_sleep: RecordingSleep
    ) -> None:
        a = make_chain("a", "https://example.com/a")
        b = make_chain("b", "https://example.com/b1", "https://example.com/b2")
        schedule = [ScheduledChain(0.3, b), ScheduledChain(0.1, a), ScheduledChain(0.2, b)]

        results = await Scheduler(fake_fetcher, sleep=recording_sleep).execute(schedule)

        assert [result.name for result in results] == ["b", "a", "b"]
        assert [result.start_delay for result in results] == [0.3, 0.1, 0.2]
        assert [len(result) for result in results] == [2, 1, 2]

    @pytest.mark.asyncio
    async def test_empty_schedule(self, fake_fetcher: FakeFetcher) -> None:
        assert await Scheduler(fake_fetcher).execute([]) == []
        assert fake_fetcher.calls == []

    @pytest.mark.asyncio
    async def test_chains_run_concurrently(self, sample_plan: LoadPlan) -> None:
        fetcher = FakeFetcher()
        plan = LoadPlan(chains=sample_plan.chains, number_of_requests=10)

        await Scheduler(fetcher).run(plan)

        assert fetcher.max_in_flight > 1

    @pytest.mark.asyncio
    async def test_max_concurrency_caps_in_flight(self, sample_plan: LoadPlan) -> None:
        fetcher = FakeFetcher()
        plan = LoadPlan(chains=sample_plan.chains, number_of_requests=20)

        results = await Scheduler(fetcher, max_concurrency=2).run(plan)

        assert len(results) == 20
        assert fetcher.max_in_flight <= 2

    @pytest.mark.asyncio
    async def test_max_concurrency_keeps_start_delay(
        self, fake_fetcher: FakeFetcher, recording_sleep: RecordingSleep
    ) -> None:
        chain = make_chain("a", "https://example.com/a")
        schedule = [ScheduledChain(0.4, chain), ScheduledChain(0.7, chain)]

        results = await Scheduler(fake_fetcher, max_concurrency=1, sleep=recording_sleep).execute(
            schedule
        )

        assert [result.start_delay for result in results] == [0.4, 0.7]

    @pytest.mark.asyncio
    async def test_progress_callback(self, fake_fetcher: FakeFetcher, sample_plan: LoadPlan) -> None:
        calls: list[tuple[int, int]] = []

        await Scheduler(fake_fetcher, progress_callback=lambda done, total: calls.append((done, total))).run(
            sample_plan
        )

        assert len(calls) == sample_plan.number_of_requests
        assert calls[-1] == (sample_plan.number_of_requests, sample_plan.number_of_requests)
        assert [done for done, _ in calls] == list(range(1, sample_plan.number_of_requests + 1))

    @pytest.mark.asyncio
    async def test_start_delays_are_smeared(self, fake_fetcher: FakeFetcher) -> None:
        chain = make_chain("a", "https://example.com/a")
        schedule = [ScheduledChain(0.05, chain), ScheduledChain(0.0, chain)]
        finished: list[float] = []

        def on_progress(done: int, total: int) -> None:
            finished.append(asyncio.get_running_loop().time())

        loop = asyncio.get_running_loop()
        started = loop.time()
        await Scheduler(fake_fetcher, progress_callback=on_progress).execute(schedule)

        assert finished[-1] - started >= 0.04
        assert finished[0] - started < 0.04
