# src/coinclock/application/catalog.py
"""
Coin Catalog - Copy-on-Write Snapshot Holder

This module keeps the currently published coin snapshot. The refresh daemon
replaces it wholesale once per simulated day; request handlers look coins up
concurrently. A lookup captures the snapshot reference once and scans that
tuple, so it sees either the old catalog or the new one, never a mix.

Files that USE this module:
- coinclock.application.refresh_daemon (publishes each fetched snapshot)
- coinclock.adapters.http.api (serves lookups and listings)
- coinclock.app (seeds the catalog from the repository)

Files that this module USES:
- coinclock.domain.models (Coin, CatalogSnapshot)
- coinclock.domain.errors (CoinNotFoundError)
"""
from __future__ import annotations

import logging
import threading
from typing import Iterable, Optional

from coinclock.domain.errors import CoinNotFoundError
from coinclock.domain.models import CatalogSnapshot, Coin

logger = logging.getLogger(__name__)


class CoinCatalog:
    """Holds the current CatalogSnapshot and serves point lookups."""

    def __init__(self, initial: Optional[Iterable[Coin]] = None):
        self._lock = threading.Lock()
        self._snapshot: CatalogSnapshot = tuple(initial) if initial is not None else ()

    def replace(self, snapshot: Iterable[Coin]) -> None:
        """
        Install a new snapshot as current.

        The incoming sequence is frozen into a tuple before the swap; the
        lock only covers the reference assignment.
        """
        frozen = tuple(snapshot)
        with self._lock:
            self._snapshot = frozen
        logger.debug("Catalog replaced: %d coins", len(frozen))

    def snapshot(self) -> CatalogSnapshot:
        """Return the current snapshot."""
        return self._snapshot

    def lookup(self, coin_id: str) -> Coin:
        """
        Return the first coin in the current snapshot whose id matches.

        Raises:
            CoinNotFoundError: If no coin in the snapshot has this id
        """
        snapshot = self._snapshot
        for coin in snapshot:
            if coin.id == coin_id:
                return coin
        raise CoinNotFoundError(coin_id)

    def __len__(self) -> int:
        return len(self._snapshot)
