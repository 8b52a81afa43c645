# src/coinclock/adapters/persistence/coin_repository.py
"""
Coin Repository - Initial Catalog Storage

This module loads the coin catalog that seeds the service at startup from
a JSON file holding an array of coin objects (the same shape the upstream
returns). A missing file seeds an empty catalog; an unreadable or corrupt
file stops startup.

Files that USE this module:
- coinclock.app (load_initial before the daemon's first tick, close on shutdown)
- coinclock.adapters.http.api (closes the repository in the app lifespan)

Files that this module USES:
- coinclock.config (settings for the seed file path)
- coinclock.domain.models (snapshot decoding)
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Union

from coinclock.config import settings
from coinclock.domain.errors import RepositoryError
from coinclock.domain.models import CatalogSnapshot, snapshot_from_json

logger = logging.getLogger(__name__)


class CoinRepository:
    """File-backed source of the initial coin catalog."""

    def __init__(self, path: Optional[Union[str, Path]] = None):
        """
        Initialize the repository.

        Args:
            path: JSON file with the seed catalog (defaults to settings.coins_file)
        """
        self.path = Path(path) if path is not None else settings.coins_file
        self._closed = False

    def load_initial(self) -> CatalogSnapshot:
        """
        Load the seed catalog.

        Returns:
            Snapshot in file order, or an empty snapshot if the file does not exist

        Raises:
            RepositoryError: If the repository is closed or the file is unreadable or malformed
        """
        if self._closed:
            raise RepositoryError("Coin repository is closed")

        if not self.path.exists():
            logger.info("No seed catalog at %s, starting empty", self.path)
            return ()

        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise RepositoryError(f"Seed catalog {self.path} is not valid JSON: {e}") from e
        except OSError as e:
            raise RepositoryError(f"Failed to read seed catalog {self.path}: {e}") from e

        try:
            snapshot = snapshot_from_json(data)
        except ValueError as e:
            raise RepositoryError(f"Seed catalog {self.path} is malformed: {e}") from e

        logger.info("Loaded %d coins from %s", len(snapshot), self.path)
        return snapshot

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            logger.info("Coin repository closed")

    @property
    def closed(self) -> bool:
        return self._closed
