"""Exception hierarchy for chainload.

Two families of errors exist:

- ``ConfigurationError``: the load plan or its settings are unusable. These are
  fatal, raised before any scheduling begins, and reported once.
- ``FetchError`` and its subclasses: typed failures of a single HTTP fetch.
  They never abort a chain or a run; the outcome classifier turns them into
  ``StepOutcome`` data.

Every error carries an ``ErrorCode`` for programmatic handling and a list of
suggestions the CLI can show.

Example:
    try:
        plan = load_plan("plan.yml")
    except ConfigurationError as e:
        print(f"Error [{e.error_code.value}]: {e.message}")
        for problem in e.problems:
            print(f"  - {problem}")
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes.

    - E1xx: Fetch errors
    - E2xx: Configuration errors
    - E9xx: Unknown/internal errors
    """

    FETCH_TIMEOUT = "E101"
    FETCH_FAILED = "E102"
    PARSE_FAILED = "E103"
    INVALID_STATUS = "E104"

    INVALID_CONFIG = "E202"

    UNKNOWN = "E999"

    @property
    def category(self) -> str:
        """Get the error category name."""
        code_num = int(self.value[1:])
        if code_num < 200:
            return "fetch"
        elif code_num < 300:
            return "configuration"
        return "unknown"


class ChainloadError(Exception):
    """Base exception for all chainload errors.

    Attributes:
        error_code: ErrorCode for this error type.
        message: Human-readable error description.
        suggestions: Actionable steps to resolve the issue.
        cause: The underlying exception (if any).
    """

    error_code: ErrorCode = ErrorCode.UNKNOWN
    default_message: str = "An unexpected error occurred"
    default_suggestions: list[str] = []

    def __init__(
        self,
        message: str | None = None,
        error_code: ErrorCode | None = None,
        cause: BaseException | None = None,
        suggestions: list[str] | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.error_code = error_code or self.error_code
        self.cause = cause
        self._suggestions = suggestions
        super().__init__(self.message)

    @property
    def suggestions(self) -> list[str]:
        """Get actionable suggestions for resolving this error."""
        if self._suggestions is not None:
            return self._suggestions
        return self.default_suggestions.copy()

    def __str__(self) -> str:
        return f"[{self.error_code.value}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error_code": self.error_code.value,
            "error_type": self.__class__.__name__,
            "message": self.message,
            "suggestions": self.suggestions,
            "cause": str(self.cause) if self.cause else None,
        }


class ConfigurationError(ChainloadError):
    """The load plan cannot be used.

    Raised for an empty chain list, an unparseable or relative URL, a
    non-positive weight, a negative delay, count or duration, and for plan
    files that cannot be read or fail schema validation. ``problems`` holds
    one line per individual violation.
    """

    error_code = ErrorCode.INVALID_CONFIG
    default_message = "Invalid load plan configuration"
    default_suggestions = [
        "Run 'chainload validate <plan>' to list every problem in the plan",
        "Every step url must be absolute, e.g. https://example.com/path",
        "Every chain needs a proportion >= 1 and at least one step",
    ]

    def __init__(
        self,
        message: str | None = None,
        problems: list[str] | None = None,
        **kwargs: Any,
    ) -> None:
        self.problems = problems or []
        super().__init__(message=message, **kwargs)

    def __str__(self) -> str:
        text = super().__str__()
        if self.problems:
            text += ":\n  " + "\n  ".join(self.problems)
        return text

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["problems"] = self.problems
        return data


class FetchError(ChainloadError):
    """A single HTTP fetch failed.

    Fetchers that are not built on httpx raise these so the outcome
    classifier can tell failure kinds apart.
    """

    error_code = ErrorCode.FETCH_FAILED
    default_message = "HTTP fetch failed"


class FetchParseError(FetchError):
    """The response could not be parsed as HTTP."""

    error_code = ErrorCode.PARSE_FAILED
    default_message = "Malformed HTTP response"


class FetchTimeoutError(FetchError):
    """The HTTP client gave up waiting."""

    error_code = ErrorCode.FETCH_TIMEOUT
    default_message = "HTTP fetch timed out"


class InvalidStatusCodeError(FetchError):
    """The server answered with a status the client rejects."""

    error_code = ErrorCode.INVALID_STATUS
    default_message = "Invalid HTTP status code"

    def __init__(self, message: str | None = None, status_code: int | None = None, **kwargs: Any) -> None:
        self.status_code = status_code
        if message is None and status_code is not None:
            message = f"Invalid HTTP status code: {status_code}"
        super().__init__(message=message, **kwargs)
