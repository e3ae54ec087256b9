"""Tests for fetch outcome classification."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from chainload.core.models import StepOutcome
from chainload.core.outcome import (
    FetchSuccess,
    Fetcher,
    classify,
    classify_failure,
    describe_cause,
    fetch_outcome,
)
from chainload.errors import (
    FetchError,
    FetchParseError,
    FetchTimeoutError,
    InvalidStatusCodeError,
)
from tests.conftest import FakeFetcher

REQUEST = httpx.Request("GET", "https://example.com/")


class ParseAndTimeoutError(FetchParseError, FetchTimeoutError):
    """Matches more than one failure kind."""


class TimeoutAndStatusError(FetchTimeoutError, InvalidStatusCodeError):
    """Matches more than one failure kind."""


class TestClassify:
    """Tests for classify and classify_failure."""

    def test_success(self) -> None:
        outcome = classify(FetchSuccess(elapsed=0.2, url="https://example.com/"))
        assert outcome == StepOutcome.success(0.2, "https://example.com/")

    @pytest.mark.parametrize(
        "error",
        [
            FetchParseError(),
            httpx.RemoteProtocolError("malformed", request=REQUEST),
            httpx.DecodingError("bad gzip", request=REQUEST),
        ],
    )
    def test_parse_errors(self, error: BaseException) -> None:
        assert classify(error) == StepOutcome.parse_error()

    @pytest.mark.parametrize(
        "error",
        [
            FetchTimeoutError(),
            httpx.ReadTimeout("timed out", request=REQUEST),
            httpx.ConnectTimeout("timed out", request=REQUEST),
            asyncio.TimeoutError(),
        ],
    )
    def test_timeouts(self, error: BaseException) -> None:
        assert classify(error) == StepOutcome.timeout()

    def test_invalid_status(self) -> None:
        response = httpx.Response(503, request=REQUEST)
        error = httpx.HTTPStatusError("503", request=REQUEST, response=response)
        assert classify(error) == StepOutcome.invalid_status_code()
        assert classify(InvalidStatusCodeError(status_code=418)) == StepOutcome.invalid_status_code()

    def test_parse_wins_over_timeout(self) -> None:
        assert classify_failure(ParseAndTimeoutError()) == StepOutcome.parse_error()

    def test_timeout_wins_over_invalid_status(self) -> None:
        assert classify_failure(TimeoutAndStatusError()) == StepOutcome.timeout()

    def test_other_carries_cause(self) -> None:
        error = httpx.ConnectError("[Errno 111] Connection refused", request=REQUEST)
        assert classify(error) == StepOutcome.other("[Errno 111] Connection refused")

    def test_other_prefers_chained_cause(self) -> None:
        try:
            try:
                raise OSError("network unreachable")
            except OSError as inner:
                raise FetchError("fetch failed") from inner
        except FetchError as error:
            outcome = classify(error)
        assert outcome == StepOutcome.other("network unreachable")

    def test_other_without_text(self) -> None:
        assert classify(RuntimeError()) == StepOutcome.other()


class TestDescribeCause:
    """Tests for describe_cause."""

    def test_plain_exception(self) -> None:
        assert describe_cause(ValueError("  bad value ")) == "bad value"

    def test_empty(self) -> None:
        assert describe_cause(ValueError()) is None


class TestFetchOutcome:
    """Tests for fetch_outcome."""

    @pytest.mark.asyncio
    async def test_success(self) -> None:
        fetcher = FakeFetcher({"https://example.com/": 0.3})
        outcome = await fetch_outcome(fetcher, "https://example.com/")
        assert outcome == StepOutcome.success(0.3, "https://example.com/")

    @pytest.mark.asyncio
    async def test_failure_does_not_raise(self) -> None:
        fetcher = FakeFetcher({"https://example.com/": httpx.ReadTimeout("slow", request=REQUEST)})
        outcome = await fetch_outcome(fetcher, "https://example.com/")
        assert outcome == StepOutcome.timeout()

    def test_fake_fetcher_is_a_fetcher(self) -> None:
        assert isinstance(FakeFetcher(), Fetcher)
