# src/coinclock/domain/errors.py
"""
Domain Errors - Catalog and Refresh Exceptions

This module defines the exceptions raised by the catalog, the upstream
fetcher and the repository. Only CoinNotFoundError crosses the public
boundary towards the HTTP layer; fetch errors stay inside the refresh path.
"""


class DomainError(Exception):
    """Base exception for domain errors."""
    pass


class CoinNotFoundError(DomainError):
    """Raised when a coin id is absent from the current snapshot."""

    def __init__(self, coin_id: str):
        super().__init__(f"Requested coin doesn't exist! (id={coin_id!r})")
        self.coin_id = coin_id


class TransientFetchError(DomainError):
    """Raised when the upstream price source cannot be reached or answers with an error."""
    pass


class UpstreamDecodeError(TransientFetchError):
    """Raised when the upstream payload is not a JSON array of coin objects."""
    pass


class FetchExhaustedError(DomainError):
    """Raised when a bounded retry policy runs out of attempts."""

    def __init__(self, url: str, attempts: int, last_error: Exception):
        super().__init__(f"Upstream fetch failed after {attempts} attempts for {url}: {last_error}")
        self.url = url
        self.attempts = attempts
        self.last_error = last_error


class FetchCancelledError(DomainError):
    """Raised when shutdown is requested while a fetch is retrying."""
    pass


class RepositoryError(DomainError):
    """Raised when the initial coin catalog cannot be loaded."""
    pass
