"""HTTP fetch collaborator."""

from chainload.http.fetcher import DEFAULT_USER_AGENT, HttpFetcher

__all__ = ["DEFAULT_USER_AGENT", "HttpFetcher"]
