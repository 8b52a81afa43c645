# src/coinclock/application/__init__.py
"""
Application Layer - Clock, Catalog and Refresh Daemon

This package contains the stateful core of the service:
- VirtualClock (simulated date)
- CoinCatalog (copy-on-write snapshot holder)
- RefreshDaemon (background refresh loop)
"""

from coinclock.application.virtual_clock import VirtualClock, to_epoch_millis
from coinclock.application.catalog import CoinCatalog
from coinclock.application.refresh_daemon import DaemonStatus, RefreshDaemon

__all__ = [
    "VirtualClock",
    "to_epoch_millis",
    "CoinCatalog",
    "RefreshDaemon",
    "DaemonStatus",
]
