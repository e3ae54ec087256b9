"""Error hierarchy for chainload."""

from chainload.errors.base import (
    ChainloadError,
    ConfigurationError,
    ErrorCode,
    FetchError,
    FetchParseError,
    FetchTimeoutError,
    InvalidStatusCodeError,
)

__all__ = [
    "ChainloadError",
    "ConfigurationError",
    "ErrorCode",
    "FetchError",
    "FetchParseError",
    "FetchTimeoutError",
    "InvalidStatusCodeError",
]
