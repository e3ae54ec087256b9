"""Core domain models for chainload.

This module defines the values that flow through a load run:

- RequestStep: one GET fetch followed by a post-fetch delay
- WeightedChain: a named, weighted, ordered sequence of steps
- LoadPlan: the chains plus how many to draw and over what window
- StepOutcome: the classified result of one fetch
- ChainResult: the ordered outcomes of one chain execution
- GroupStatistics: per-name latency and error statistics

All of them are immutable once constructed. Construction validates the
invariants a run relies on and raises ``ConfigurationError`` when one does
not hold.

Example:
    >>> from chainload.core.models import LoadPlan, RequestStep, WeightedChain
    >>>
    >>> plan = LoadPlan(
    ...     chains=(
    ...         WeightedChain(
    ...             name="homepage",
    ...             proportion=2,
    ...             steps=(
    ...                 RequestStep("https://example.com/", delay=0.01),
    ...                 RequestStep("https://example.com/app.js"),
    ...             ),
    ...         ),
    ...     ),
    ...     number_of_requests=100,
    ...     duration=10.0,
    ... )
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx

from chainload.errors import ConfigurationError


def validate_absolute_url(url: str) -> str:
    """Check that ``url`` parses as an absolute URI.

    Args:
        url: The URL text to check.

    Returns:
        The URL with surrounding whitespace removed.

    Raises:
        ConfigurationError: If the URL does not parse or lacks a scheme or host.
    """
    if not isinstance(url, str) or not url.strip():
        raise ConfigurationError(f"Invalid url {url!r}: url cannot be empty")

    url = url.strip()
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid url {url!r}: {e}", cause=e) from e

    if not parsed.is_absolute_url or not parsed.host:
        raise ConfigurationError(f"Invalid url {url!r}: url must be absolute (scheme://host/...)")
    return url


@dataclass(frozen=True)
class RequestStep:
    """A single fetch in a chain.

    Attributes:
        url: Absolute URL to GET.
        delay: Seconds to wait after the fetch resolves, before the next step.
    """

    url: str
    delay: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "url", validate_absolute_url(self.url))
        if not math.isfinite(self.delay) or self.delay < 0:
            raise ConfigurationError(
                f"Invalid delay {self.delay} for {self.url}: must be a finite number >= 0"
            )

    def to_dict(self) -> dict[str, Any]:
        return {"url": self.url, "delay_s": self.delay}


@dataclass(frozen=True)
class WeightedChain:
    """A named sequence of steps and its relative selection weight.

    The name is only used to group results. Several chains may share a name,
    in which case their results land in the same group.

    Attributes:
        name: Display name used for grouping statistics.
        steps: Ordered, non-empty sequence of steps.
        proportion: Relative weight (>= 1) for sampling.
    """

    name: str
    steps: tuple[RequestStep, ...]
    proportion: int = 1

    def __post_init__(self) -> None:
        object.__setattr__(self, "steps", tuple(self.steps))
        if not self.steps:
            raise ConfigurationError(f"Chain {self.name!r} must have at least one step")
        if isinstance(self.proportion, bool) or not isinstance(self.proportion, int):
            raise ConfigurationError(
                f"Chain {self.name!r} proportion must be an integer, got {self.proportion!r}"
            )
        if self.proportion < 1:
            raise ConfigurationError(
                f"Chain {self.name!r} proportion must be >= 1, got {self.proportion}"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "proportion": self.proportion,
            "steps": [step.to_dict() for step in self.steps],
        }


@dataclass(frozen=True)
class LoadPlan:
    """Everything the scheduler needs for one load run.

    Attributes:
        chains: Non-empty sequence of weighted chains.
        number_of_requests: How many chain executions to draw (>= 0).
        duration: Smear window in seconds; start delays fall in [0, duration).
    """

    chains: tuple[WeightedChain, ...]
    number_of_requests: int
    duration: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "chains", tuple(self.chains))
        if not self.chains:
            raise ConfigurationError("Load plan must define at least one chain")
        if self.number_of_requests < 0:
            raise ConfigurationError(
                f"number_of_requests must be >= 0, got {self.number_of_requests}"
            )
        if not math.isfinite(self.duration) or self.duration < 0:
            raise ConfigurationError(f"duration must be a finite number >= 0, got {self.duration}")

    @property
    def total_weight(self) -> int:
        return sum(chain.proportion for chain in self.chains)

    @property
    def names(self) -> list[str]:
        """Distinct chain names in declaration order."""
        return list(dict.fromkeys(chain.name for chain in self.chains))

    def to_dict(self) -> dict[str, Any]:
        return {
            "number_of_requests": self.number_of_requests,
            "duration_s": self.duration,
            "chains": [chain.to_dict() for chain in self.chains],
        }


class OutcomeKind(Enum):
    """Classification of a single fetch."""

    SUCCESS = "success"
    PARSE_ERROR = "parse_error"
    TIMEOUT = "timeout"
    INVALID_STATUS_CODE = "invalid_status_code"
    OTHER = "other"

    @property
    def label(self) -> str:
        return _KIND_LABELS[self]


_KIND_LABELS = {
    OutcomeKind.SUCCESS: "Success",
    OutcomeKind.PARSE_ERROR: "Parse Error",
    OutcomeKind.TIMEOUT: "Timeout",
    OutcomeKind.INVALID_STATUS_CODE: "Invalid Status Code",
    OutcomeKind.OTHER: "Other",
}


@dataclass(frozen=True)
class StepOutcome:
    """The classified result of one fetch.

    Only ``SUCCESS`` outcomes carry ``elapsed`` (seconds) and ``url`` (the
    resolved URL). Only ``OTHER`` outcomes carry an optional ``cause``.
    Equality is structural, so two ``OTHER`` outcomes with different cause
    text are different kinds of error.

    Use the named constructors rather than building one by hand:

        >>> StepOutcome.success(0.25, "https://example.com/")
        >>> StepOutcome.timeout()
        >>> StepOutcome.other("connection refused")
    """

    kind: OutcomeKind
    elapsed: float | None = None
    url: str | None = None
    cause: str | None = None

    @classmethod
    def success(cls, elapsed: float, url: str = "") -> StepOutcome:
        return cls(OutcomeKind.SUCCESS, elapsed=elapsed, url=url)

    @classmethod
    def parse_error(cls) -> StepOutcome:
        return cls(OutcomeKind.PARSE_ERROR)

    @classmethod
    def timeout(cls) -> StepOutcome:
        return cls(OutcomeKind.TIMEOUT)

    @classmethod
    def invalid_status_code(cls) -> StepOutcome:
        return cls(OutcomeKind.INVALID_STATUS_CODE)

    @classmethod
    def other(cls, cause: str | None = None) -> StepOutcome:
        return cls(OutcomeKind.OTHER, cause=cause or None)

    @property
    def is_success(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    def __str__(self) -> str:
        if self.kind is OutcomeKind.OTHER and self.cause:
            return f"{self.kind.label}: {self.cause}"
        return self.kind.label

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind.value}
        if self.is_success:
            data["elapsed_s"] = self.elapsed
            data["url"] = self.url
        elif self.cause is not None:
            data["cause"] = self.cause
        return data


@dataclass(frozen=True)
class ChainResult:
    """Ordered outcomes of one execution of a chain.

    Attributes:
        name: Name of the chain this execution was drawn from.
        outcomes: One outcome per step, in step order.
        start_delay: Seconds the execution waited before its first step.
    """

    name: str
    outcomes: tuple[StepOutcome, ...]
    start_delay: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "outcomes", tuple(self.outcomes))

    def __len__(self) -> int:
        return len(self.outcomes)

    @property
    def success(self) -> bool:
        return all(outcome.is_success for outcome in self.outcomes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_delay_s": self.start_delay,
            "outcomes": [outcome.to_dict() for outcome in self.outcomes],
        }


GroupedResults = dict[str, list[ChainResult]]


@dataclass(frozen=True)
class GroupStatistics:
    """Latency and error statistics for every chain sharing one name.

    ``mean`` and ``standard_deviation`` are in seconds and are ``None`` when
    no chain in the group fully succeeded. They are never reported as zero
    in that case.

    Attributes:
        name: The group (chain) name.
        total: Number of chain executions in the group.
        successful: Executions whose every step succeeded.
        mean: Mean total elapsed time of the successful executions.
        standard_deviation: Population standard deviation of the same sample.
        failed: ``total - successful``.
        common_errors: Up to two most frequent failure outcomes, most
            frequent first.
    """

    name: str
    total: int
    successful: int
    mean: float | None
    standard_deviation: float | None
    failed: int
    common_errors: tuple[StepOutcome, ...] = field(default_factory=tuple)

    @property
    def has_data(self) -> bool:
        return self.mean is not None

    @property
    def success_rate(self) -> float:
        """Percentage of fully successful executions."""
        if self.total == 0:
            return 0.0
        return (self.successful / self.total) * 100

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "total": self.total,
            "successful": self.successful,
            "failed": self.failed,
            "mean_s": self.mean,
            "standard_deviation_s": self.standard_deviation,
            "common_errors": [str(error) for error in self.common_errors],
        }
