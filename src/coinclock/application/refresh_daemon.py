# src/coinclock/application/refresh_daemon.py
"""
Refresh Daemon - Background Catalog Refresh on the Virtual Clock

This module runs the single background loop that drives the simulation:
fetch the catalog for the current simulated date, publish it into the
catalog, advance the clock by one day, then wait one day duration.

The loop runs in a daemon thread and stops cooperatively: stop() sets an
event that aborts the fetcher's retry loop and cuts the wait short.

Files that USE this module:
- coinclock.adapters.http.api (starts/stops the daemon in the app lifespan, reads status)
- coinclock.app (wires the daemon)

Files that this module USES:
- coinclock.application.catalog (CoinCatalog, the publish target)
- coinclock.application.virtual_clock (VirtualClock, the simulated date)
- coinclock.domain.errors (FetchCancelledError, FetchExhaustedError)
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Optional

from coinclock.application.catalog import CoinCatalog
from coinclock.application.virtual_clock import VirtualClock
from coinclock.domain.errors import FetchCancelledError, FetchExhaustedError

if TYPE_CHECKING:
    from coinclock.adapters.upstream.fetcher import UpstreamFetcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DaemonStatus:
    """Point-in-time view of the refresh daemon for health reporting."""
    running: bool
    ticks: int
    current_date: date
    last_refresh: Optional[datetime] = None
    last_error: Optional[str] = None


class RefreshDaemon:
    """Sole writer of the catalog and the clock."""

    def __init__(
        self,
        fetcher: UpstreamFetcher,
        catalog: CoinCatalog,
        clock: VirtualClock,
        stop_event: Optional[threading.Event] = None,
    ):
        self.fetcher = fetcher
        self.catalog = catalog
        self.clock = clock
        self._stop_event = stop_event if stop_event is not None else threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._ticks = 0
        self._last_refresh: Optional[datetime] = None
        self._last_error: Optional[str] = None

    @property
    def stop_event(self) -> threading.Event:
        return self._stop_event

    def tick(self) -> bool:
        """
        Run one fetch, publish and advance step.

        Returns:
            True if a snapshot was published and the clock advanced,
            False if the retry policy gave up (the stale snapshot stays
            in place and the same date is fetched again next tick)

        Raises:
            FetchCancelledError: If shutdown was requested during the fetch
        """
        sim_date = self.clock.now()
        try:
            snapshot = self.fetcher.fetch(sim_date, self._stop_event)
        except FetchExhaustedError as e:
            self._last_error = str(e)
            logger.error("Refresh for %s failed, serving stale catalog: %s", sim_date.isoformat(), e)
            return False

        self.catalog.replace(snapshot)
        new_date = self.clock.advance()

        self._ticks += 1
        self._last_refresh = datetime.now(timezone.utc)
        self._last_error = None
        logger.info(
            "Published %d coins for %s, simulated date is now %s",
            len(snapshot),
            sim_date.isoformat(),
            new_date.isoformat(),
        )
        return True

    def run(self) -> None:
        """Loop until stop() is called."""
        logger.info(
            "Starting price management daemon at %s (one day every %ss)",
            self.clock.now().isoformat(),
            self.clock.day_duration.total_seconds(),
        )
        while not self._stop_event.is_set():
            try:
                self.tick()
            except FetchCancelledError:
                break
            except Exception as e:
                self._last_error = str(e)
                logger.exception("Unexpected error during refresh: %s (type: %s)", e, type(e).__name__)
            if self._stop_event.wait(self.clock.day_duration.total_seconds()):
                break
        logger.info("Price management daemon stopped at %s", self.clock.now().isoformat())

    def start(self) -> None:
        """
        Launch the loop thread; a no-op while it is already running.

        Raises:
            RuntimeError: If a previous thread was asked to stop but has not exited yet
        """
        if self._thread and self._thread.is_alive():
            if self._stop_event.is_set():
                raise RuntimeError("Previous refresh thread is still stopping; refusing to start a second writer")
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self.run, name="RefreshDaemon", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> bool:
        """
        Signal the loop to stop and wait for the thread to exit.

        Returns:
            True if the thread has exited, False if it is still finishing an
            in-flight request after the timeout
        """
        self._stop_event.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=timeout)
        if self._thread and self._thread.is_alive():
            logger.warning("Refresh thread still running after %ss, it will exit after its current request", timeout)
            return False
        self._thread = None
        return True

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def status(self) -> DaemonStatus:
        return DaemonStatus(
            running=self.is_running(),
            ticks=self._ticks,
            current_date=self.clock.now(),
            last_refresh=self._last_refresh,
            last_error=self._last_error,
        )
