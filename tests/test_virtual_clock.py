# tests/test_virtual_clock.py
"""
Virtual Clock Tests - Unit Tests for the Simulated Calendar

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- coinclock.application.virtual_clock (VirtualClock, to_epoch_millis)
"""
import threading
from datetime import date, datetime, timedelta, timezone

import pytest

from coinclock.application.virtual_clock import VirtualClock, to_epoch_millis


class TestVirtualClock:
    def test_now_is_initial_date(self):
        clock = VirtualClock(date(2014, 1, 1), timedelta(minutes=1))
        assert clock.now() == date(2014, 1, 1)
        assert clock.day_duration == timedelta(minutes=1)

    def test_advance_moves_exactly_one_day(self):
        clock = VirtualClock(date(2014, 1, 1), timedelta(minutes=1))
        assert clock.advance() == date(2014, 1, 2)
        assert clock.now() == date(2014, 1, 2)

    @pytest.mark.parametrize("n", [0, 1, 30, 365, 366])
    def test_n_advances_add_n_days(self, n):
        start = date(2014, 1, 1)
        clock = VirtualClock(start, timedelta(seconds=1))
        for _ in range(n):
            clock.advance()
        assert clock.now() == start + timedelta(days=n)

    def test_crosses_month_and_leap_day(self):
        clock = VirtualClock(date(2016, 2, 28), timedelta(seconds=1))
        assert clock.advance() == date(2016, 2, 29)
        assert clock.advance() == date(2016, 3, 1)

    def test_datetime_start_is_truncated_to_date(self):
        clock = VirtualClock(datetime(2014, 1, 1, 15, 30), timedelta(seconds=1))
        assert clock.now() == date(2014, 1, 1)
        assert type(clock.now()) is date

    @pytest.mark.parametrize("duration", [timedelta(0), timedelta(seconds=-1)])
    def test_rejects_non_positive_day_duration(self, duration):
        with pytest.raises(ValueError):
            VirtualClock(date(2014, 1, 1), duration)

    def test_now_millis(self):
        clock = VirtualClock(date(2014, 1, 1), timedelta(minutes=1))
        assert clock.now_millis() == 1388534400000
        clock.advance()
        assert clock.now_millis() == 1388534400000 + 86_400_000

    def test_readers_never_see_backward_or_partial_dates(self):
        start = date(2014, 1, 1)
        clock = VirtualClock(start, timedelta(seconds=1))
        errors = []
        done = threading.Event()

        def reader():
            last = start
            while not done.is_set():
                current = clock.now()
                if not isinstance(current, date) or current < last:
                    errors.append(current)
                last = current

        readers = [threading.Thread(target=reader) for _ in range(4)]
        for t in readers:
            t.start()
        for _ in range(2000):
            clock.advance()
        done.set()
        for t in readers:
            t.join()

        assert errors == []
        assert clock.now() == start + timedelta(days=2000)


class TestEpochMillis:
    def test_epoch(self):
        assert to_epoch_millis(date(1970, 1, 1)) == 0

    def test_matches_utc_midnight(self):
        expected = int(datetime(2021, 6, 15, tzinfo=timezone.utc).timestamp() * 1000)
        assert to_epoch_millis(date(2021, 6, 15)) == expected
