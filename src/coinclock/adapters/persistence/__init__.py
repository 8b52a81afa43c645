# src/coinclock/adapters/persistence/__init__.py
"""
Persistence Adapters - Data Storage

This package contains the file-backed source of the initial coin catalog.
"""

from coinclock.adapters.persistence.coin_repository import CoinRepository

__all__ = ["CoinRepository"]
