"""Classification of fetch attempts into step outcomes.

A fetch either completes, producing a ``FetchSuccess``, or raises. Both are
turned into exactly one ``StepOutcome`` here. The failure kinds are checked
in a fixed order, which is the tie-break when an exception could match more
than one of them: parse errors, then timeouts, then invalid status codes,
then anything else.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import httpx

from chainload.core.models import StepOutcome
from chainload.errors import FetchParseError, FetchTimeoutError, InvalidStatusCodeError

logger = logging.getLogger(__name__)

PARSE_ERRORS: tuple[type[BaseException], ...] = (
    FetchParseError,
    httpx.RemoteProtocolError,
    httpx.DecodingError,
)
TIMEOUT_ERRORS: tuple[type[BaseException], ...] = (
    FetchTimeoutError,
    httpx.TimeoutException,
    asyncio.TimeoutError,
)
INVALID_STATUS_ERRORS: tuple[type[BaseException], ...] = (
    InvalidStatusCodeError,
    httpx.HTTPStatusError,
)


@dataclass(frozen=True)
class FetchSuccess:
    """A fetch that completed and whose body was fully read.

    Attributes:
        elapsed: Seconds from fetch start to the end of the body.
        url: The resolved URL of the response.
    """

    elapsed: float
    url: str


@runtime_checkable
class Fetcher(Protocol):
    """Anything that can GET a URL and drain its body."""

    async def fetch(self, url: str) -> FetchSuccess: ...


def describe_cause(error: BaseException) -> str | None:
    """Best-effort human readable description of what went wrong.

    Prefers the chained cause when there is one, since transport errors
    usually wrap the socket-level exception that explains them.
    """
    for candidate in (error.__cause__, error):
        if candidate is None:
            continue
        text = str(candidate).strip()
        if text:
            return text
    return None


def classify_failure(error: BaseException) -> StepOutcome:
    """Map a fetch exception to a non-success outcome.

    Args:
        error: The exception raised by the fetch.

    Returns:
        ParseError, Timeout, InvalidStatusCode or Other(cause).
    """
    if isinstance(error, PARSE_ERRORS):
        return StepOutcome.parse_error()
    if isinstance(error, TIMEOUT_ERRORS):
        return StepOutcome.timeout()
    if isinstance(error, INVALID_STATUS_ERRORS):
        return StepOutcome.invalid_status_code()
    return StepOutcome.other(describe_cause(error))


def classify(attempt: FetchSuccess | BaseException) -> StepOutcome:
    """Classify the result of one fetch attempt.

    Args:
        attempt: The ``FetchSuccess`` the fetch returned, or the exception it
            raised.

    Returns:
        The corresponding StepOutcome.
    """
    if isinstance(attempt, FetchSuccess):
        return StepOutcome.success(attempt.elapsed, attempt.url)
    return classify_failure(attempt)


async def fetch_outcome(fetcher: Fetcher, url: str) -> StepOutcome:
    """Fetch ``url`` and classify the result.

    Fetch failures are captured as outcomes and never propagate.
    """
    try:
        attempt: FetchSuccess | BaseException = await fetcher.fetch(url)
    except Exception as e:
        attempt = e
    outcome = classify(attempt)
    if not outcome.is_success:
        logger.debug(f"Fetch of {url} failed: {outcome}")
    return outcome
