"""Tests for the chainload exception hierarchy."""

from __future__ import annotations

from chainload.errors import (
    ChainloadError,
    ConfigurationError,
    ErrorCode,
    FetchError,
    FetchParseError,
    FetchTimeoutError,
    InvalidStatusCodeError,
)


class TestErrorCode:
    def test_categories(self) -> None:
        assert ErrorCode.FETCH_TIMEOUT.category == "fetch"
        assert ErrorCode.INVALID_CONFIG.category == "configuration"
        assert ErrorCode.UNKNOWN.category == "unknown"


class TestChainloadError:
    """Tests for the base error."""

    def test_defaults(self) -> None:
        error = ChainloadError()
        assert error.error_code == ErrorCode.UNKNOWN
        assert str(error) == "[E999] An unexpected error occurred"
        assert error.suggestions == []

    def test_to_dict(self) -> None:
        cause = OSError("disk")
        data = ChainloadError("broken", cause=cause, suggestions=["retry"]).to_dict()
        assert data == {
            "error_code": "E999",
            "error_type": "ChainloadError",
            "message": "broken",
            "suggestions": ["retry"],
            "cause": "disk",
        }


class TestConfigurationError:
    """Tests for ConfigurationError."""

    def test_problems_in_str(self) -> None:
        error = ConfigurationError("Load plan has 2 problem(s)", problems=["a: bad", "b: worse"])
        assert str(error) == "[E202] Load plan has 2 problem(s):\n  a: bad\n  b: worse"
        assert error.to_dict()["problems"] == ["a: bad", "b: worse"]

    def test_default_suggestions(self) -> None:
        error = ConfigurationError()
        assert error.suggestions
        error.suggestions.append("mutated")
        assert "mutated" not in ConfigurationError().suggestions


class TestFetchErrors:
    """Tests for the fetch error family."""

    def test_hierarchy(self) -> None:
        for cls in (FetchParseError, FetchTimeoutError, InvalidStatusCodeError):
            assert issubclass(cls, FetchError)
            assert issubclass(cls, ChainloadError)

    def test_status_code_message(self) -> None:
        error = InvalidStatusCodeError(status_code=503)
        assert error.status_code == 503
        assert error.message == "Invalid HTTP status code: 503"
        assert error.error_code == ErrorCode.INVALID_STATUS
