# src/coinclock/domain/models.py
"""
Domain Models - Coins and Catalog Snapshots

This module contains the domain objects shared by every layer:
- Coin: one tracked cryptocurrency at a point in simulated time
- CatalogSnapshot: the ordered, immutable coin sequence of one refresh
- RetryPolicy: delay and attempt bounds for upstream fetches

Files that USE this module:
- coinclock.application.catalog (stores and scans snapshots)
- coinclock.adapters.upstream.fetcher (decodes upstream JSON into coins)
- coinclock.adapters.persistence.coin_repository (decodes the seed file)
- coinclock.adapters.http.api (returns coin payloads)

Files that this module USES:
- None (pure domain layer, no external dependencies)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from dataclasses import dataclass, field  # Decorator for creating data classes
from types import MappingProxyType  # Read-only view over the payload dict
from typing import Any, Mapping, Optional, Tuple


@dataclass(frozen=True)
class Coin:
    """
    One cryptocurrency as reported by the upstream for a simulated day.

    Attributes:
        id: Identifier, unique within a snapshot (e.g. "bitcoin")
        data: Full upstream object, transported end-to-end untouched
    """
    id: str
    data: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        # frozen dataclass: bypass __setattr__ to store a read-only view
        object.__setattr__(self, "data", MappingProxyType(dict(self.data)))

    @classmethod
    def from_json(cls, obj: Any) -> Coin:
        """
        Build a Coin from one decoded JSON object.

        Args:
            obj: Decoded JSON value, expected to be an object with a string "id"

        Returns:
            Coin carrying the whole object as payload

        Raises:
            ValueError: If obj is not an object or lacks a non-empty string id
        """
        if not isinstance(obj, dict):
            raise ValueError(f"coin entry must be an object, got {type(obj).__name__}")
        coin_id = obj.get("id")
        if not isinstance(coin_id, str) or not coin_id:
            raise ValueError(f"coin entry has no valid 'id': {coin_id!r}")
        return cls(id=coin_id, data=obj)

    def to_json(self) -> dict:
        """Return the payload as a plain JSON-serializable dict."""
        payload = dict(self.data)
        payload.setdefault("id", self.id)
        return payload


@dataclass(frozen=True)
class RetryPolicy:
    """
    How the upstream fetcher waits between failed attempts.

    With the defaults the delay is a fixed second and attempts are unbounded.

    Attributes:
        delay_seconds: Wait after the first failed attempt
        backoff_factor: Multiplier applied to the wait after each further failure
        max_delay_seconds: Upper bound for any single wait
        max_attempts: Total attempts before giving up (None = never give up)
    """
    delay_seconds: float = 1.0
    backoff_factor: float = 1.0
    max_delay_seconds: float = 60.0
    max_attempts: Optional[int] = None

    def delay_for(self, failed_attempts: int) -> float:
        """Return the wait after the given number of consecutive failures (1-based)."""
        cap = max(self.max_delay_seconds, self.delay_seconds)
        delay = self.delay_seconds
        # grow step by step so large attempt counts stop at the cap instead of overflowing
        for _ in range(max(0, failed_attempts - 1)):
            if delay <= 0 or delay >= cap or self.backoff_factor <= 1.0:
                break
            delay *= self.backoff_factor
        return min(delay, cap)

    def exhausted(self, attempts: int) -> bool:
        return self.max_attempts is not None and attempts >= self.max_attempts


# Ordered and immutable; lookups return the first match when ids repeat.
CatalogSnapshot = Tuple[Coin, ...]


def snapshot_from_json(items: Any) -> CatalogSnapshot:
    """
    Decode a JSON array into a CatalogSnapshot.

    Raises:
        ValueError: If items is not a list or any entry is not a valid coin
    """
    if not isinstance(items, list):
        raise ValueError(f"coin catalog must be a JSON array, got {type(items).__name__}")
    return tuple(Coin.from_json(item) for item in items)
