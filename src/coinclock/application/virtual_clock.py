# src/coinclock/application/virtual_clock.py
"""
Virtual Clock - Simulated Calendar for Historical Replay

Owns the simulated "current date" and the real-time interval that stands
for one simulated day. The refresh daemon is the only writer; HTTP handlers
and the fetcher read it concurrently.

Files that USE this module:
- coinclock.application.refresh_daemon (reads now(), calls advance())
- coinclock.adapters.http.api (serves the current simulated date)
- coinclock.app (builds the clock from settings)

Files that this module USES:
- None (standard library only)
"""
from __future__ import annotations

import logging
import threading
from datetime import date, datetime, time, timedelta, timezone

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


class VirtualClock:
    """Simulated date that moves forward one day at a time."""

    def __init__(self, start: date, day_duration: timedelta):
        """
        Initialize the clock.

        Args:
            start: First simulated date (e.g. 2014-01-01)
            day_duration: Real-time interval representing one simulated day
        """
        if isinstance(start, datetime):
            start = start.date()
        if day_duration <= timedelta(0):
            raise ValueError("day_duration must be positive")
        self._current = start
        self._day_duration = day_duration
        self._lock = threading.Lock()

    @property
    def day_duration(self) -> timedelta:
        return self._day_duration

    def now(self) -> date:
        """Return the current simulated date."""
        return self._current

    def now_millis(self) -> int:
        """Return the current simulated date as epoch milliseconds at UTC midnight."""
        return to_epoch_millis(self._current)

    def advance(self) -> date:
        """
        Move the simulated date forward by exactly one day.

        Returns:
            The new current date
        """
        with self._lock:
            self._current = self._current + ONE_DAY
            current = self._current
        logger.debug("Virtual clock advanced to %s", current.isoformat())
        return current


def to_epoch_millis(day: date) -> int:
    """Milliseconds since the Unix epoch for midnight UTC of the given day."""
    moment = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return int(moment.timestamp() * 1000)
