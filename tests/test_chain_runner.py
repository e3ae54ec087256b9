"""Tests for sequential chain execution."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from chainload.core.models import RequestStep, StepOutcome, WeightedChain
from chainload.core.outcome import FetchSuccess
from chainload.runner.chain import ChainRunner
from tests.conftest import FakeFetcher, RecordingSleep, make_chain

REQUEST = httpx.Request("GET", "https://example.com/")


class TestChainRunner:
    """Tests for ChainRunner."""

    @pytest.mark.asyncio
    async def test_outcomes_in_step_order(self, recording_sleep: RecordingSleep) -> None:
        fetcher = FakeFetcher(
            {
                "https://example.com/a": 0.1,
                "https://example.com/b": httpx.ReadTimeout("slow", request=REQUEST),
                "https://example.com/c": 0.3,
            }
        )
        chain = make_chain(
            "abc", "https://example.com/a", "https://example.com/b", "https://example.com/c"
        )

        result = await ChainRunner(fetcher, sleep=recording_sleep).run(0.0, chain)

        assert result.name == "abc"
        assert result.outcomes == (
            StepOutcome.success(0.1, "https://example.com/a"),
            StepOutcome.timeout(),
            StepOutcome.success(0.3, "https://example.com/c"),
        )

    @pytest.mark.asyncio
    async def test_failing_step_does_not_stop_chain(self, recording_sleep: RecordingSleep) -> None:
        fetcher = FakeFetcher({"https://example.com/a": RuntimeError("boom")})
        chain = make_chain("a", "https://example.com/a", "https://example.com/b")

        result = await ChainRunner(fetcher, sleep=recording_sleep).run(0.0, chain)

        assert fetcher.calls == ["https://example.com/a", "https://example.com/b"]
        assert result.outcomes[0] == StepOutcome.other("boom")
        assert result.outcomes[1].is_success

    @pytest.mark.asyncio
    async def test_sleeps_start_delay_then_each_step_delay(
        self, fake_fetcher: FakeFetcher, recording_sleep: RecordingSleep
    ) -> None:
        chain = WeightedChain(
            name="a",
            steps=(
                RequestStep("https://example.com/1", delay=0.5),
                RequestStep("https://example.com/2", delay=0.0),
                RequestStep("https://example.com/3", delay=1.25),
            ),
        )

        result = await ChainRunner(fake_fetcher, sleep=recording_sleep).run(2.0, chain)

        assert recording_sleep.delays == [2.0, 0.5, 0.0, 1.25]
        assert result.start_delay == 2.0

    @pytest.mark.asyncio
    async def test_steps_never_overlap(self) -> None:
        log: list[str] = []

        class SlowFetcher:
            async def fetch(self, url: str) -> FetchSuccess:
                log.append(f"start {url}")
                await asyncio.sleep(0.01)
                log.append(f"end {url}")
                return FetchSuccess(elapsed=0.01, url=url)

        chain = make_chain("a", "https://example.com/1", "https://example.com/2")
        await ChainRunner(SlowFetcher()).run(0.0, chain)

        assert log == [
            "start https://example.com/1",
            "end https://example.com/1",
            "start https://example.com/2",
            "end https://example.com/2",
        ]

    @pytest.mark.asyncio
    async def test_waits_for_step_delay(self, fake_fetcher: FakeFetcher) -> None:
        chain = make_chain("a", "https://example.com/1", "https://example.com/2", delay=0.05)
        loop = asyncio.get_running_loop()

        started = loop.time()
        await ChainRunner(fake_fetcher).run(0.0, chain)

        assert loop.time() - started >= 0.09
