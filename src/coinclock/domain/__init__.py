# src/coinclock/domain/__init__.py
"""
Domain Layer - Pure Business Objects

This package contains domain models and errors.
No dependencies on infrastructure or external systems.
"""

from coinclock.domain.models import (
    CatalogSnapshot,
    Coin,
    RetryPolicy,
    snapshot_from_json,
)
from coinclock.domain.errors import (
    CoinNotFoundError,
    DomainError,
    FetchCancelledError,
    FetchExhaustedError,
    RepositoryError,
    TransientFetchError,
    UpstreamDecodeError,
)

__all__ = [
    "Coin",
    "CatalogSnapshot",
    "RetryPolicy",
    "snapshot_from_json",
    "DomainError",
    "CoinNotFoundError",
    "TransientFetchError",
    "UpstreamDecodeError",
    "FetchExhaustedError",
    "FetchCancelledError",
    "RepositoryError",
]
