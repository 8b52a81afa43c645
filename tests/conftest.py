# tests/conftest.py
"""
Shared pytest fixtures for the test suite.

Fixtures
--------
sample_coins
    A small btc/eth snapshot.

recording_event
    A threading.Event whose wait() returns immediately and records the
    requested timeouts, so retry delays can be asserted without sleeping.

ok_response
    Factory for a mocked ``requests`` response carrying a JSON payload.
"""
import threading
from typing import Callable, List, Optional
from unittest.mock import Mock

import pytest

from coinclock.domain.models import Coin


class RecordingEvent(threading.Event):
    """Event that never blocks; wait() records its timeout and reports the flag."""

    def __init__(self, on_wait: Optional[Callable[[float], None]] = None):
        super().__init__()
        self.waits: List[float] = []
        self._on_wait = on_wait

    def wait(self, timeout=None):
        self.waits.append(timeout)
        if self._on_wait is not None:
            self._on_wait(timeout)
        return self.is_set()


@pytest.fixture
def sample_coins():
    return (
        Coin.from_json({"id": "btc", "name": "Bitcoin", "current_price": 771.4}),
        Coin.from_json({"id": "eth", "name": "Ethereum", "current_price": 0.0}),
    )


@pytest.fixture
def recording_event() -> RecordingEvent:
    return RecordingEvent()


@pytest.fixture
def ok_response():
    def _make(payload):
        resp = Mock()
        resp.json.return_value = payload
        resp.raise_for_status.return_value = None
        return resp
    return _make
