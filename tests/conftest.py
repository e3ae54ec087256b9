"""Pytest fixtures for chainload tests."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Callable
from typing import Any

import pytest

from chainload.config.settings import LoadSettings
from chainload.core.models import LoadPlan, RequestStep, WeightedChain
from chainload.core.outcome import FetchSuccess
from chainload.observability.logging import ROOT_LOGGER_NAME


class FakeFetcher:
    """Fetcher that answers from a URL table instead of the network.

    Each URL maps to either an elapsed time in seconds (success) or an
    exception instance to raise. Unknown URLs succeed with ``default_elapsed``.
    """

    def __init__(
        self,
        responses: dict[str, float | BaseException] | None = None,
        default_elapsed: float = 0.01,
    ) -> None:
        self.responses = responses or {}
        self.default_elapsed = default_elapsed
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.entered = False
        self.exited = False

    async def fetch(self, url: str) -> FetchSuccess:
        self.calls.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            response = self.responses.get(url, self.default_elapsed)
            if isinstance(response, BaseException):
                raise response
            return FetchSuccess(elapsed=response, url=url)
        finally:
            self.in_flight -= 1

    async def __aenter__(self) -> FakeFetcher:
        self.entered = True
        return self

    async def __aexit__(self, *args: Any) -> None:
        self.exited = True


class RecordingSleep:
    """Sleep replacement that records requested delays and yields once."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)


def make_chain(name: str, *urls: str, proportion: int = 1, delay: float = 0.0) -> WeightedChain:
    """Build a chain whose steps all share the same post-fetch delay."""
    return WeightedChain(
        name=name,
        proportion=proportion,
        steps=tuple(RequestStep(url, delay=delay) for url in urls),
    )


def fetcher_factory_for(fetcher: FakeFetcher) -> Callable[[LoadSettings], FakeFetcher]:
    def factory(settings: LoadSettings) -> FakeFetcher:
        return fetcher

    return factory


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    """Create a fetcher where every URL succeeds."""
    return FakeFetcher()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    """Create a sleep function that does not actually wait."""
    return RecordingSleep()


@pytest.fixture
def rng() -> random.Random:
    """Create a seeded random source."""
    return random.Random(1234)


@pytest.fixture
def sample_plan() -> LoadPlan:
    """Create a two-chain plan weighted 1:2."""
    return LoadPlan(
        chains=(
            make_chain("homepage", "https://example.com/", "https://example.com/app.js"),
            make_chain("search", "https://example.com/?q=load", proportion=2),
        ),
        number_of_requests=30,
        duration=0.0,
    )


@pytest.fixture
def settings() -> LoadSettings:
    """Settings that ignore the environment's .env file."""
    return LoadSettings(_env_file=None)


@pytest.fixture
def plan_file(tmp_path: Any) -> Any:
    """Write a valid YAML plan file and return its path."""
    path = tmp_path / "plan.yml"
    path.write_text(
        "number_of_requests: 6\n"
        "duration_s: 0\n"
        "chains:\n"
        "  - name: homepage\n"
        "    proportion: 1\n"
        "    steps:\n"
        "      - url: https://example.com/\n"
        "        delay_s: 0\n"
        "  - name: search\n"
        "    proportion: 2\n"
        "    steps:\n"
        "      - url: https://example.com/?q=load\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture(autouse=True)
def reset_chainload_logger() -> Any:
    """Undo handlers installed by CLI commands so caplog keeps working."""
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
