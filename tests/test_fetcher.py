# tests/test_fetcher.py
"""
Fetcher Tests - Unit Tests for the Upstream Catalog Client

This module tests URL construction, decoding, the retry discipline
(fixed delay, backoff, bounded attempts) and cancellation of UpstreamFetcher.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- coinclock.adapters.upstream.fetcher (UpstreamFetcher for testing)
- unittest.mock (patching requests.get)
- pytest (testing framework)
"""
import pytest  # Testing framework for writing and running tests

from datetime import date  # Simulated dates
from unittest.mock import Mock, patch  # Mock objects and patching for testing without real API calls
import requests  # HTTP library (used for mocking errors)

from conftest import RecordingEvent
from coinclock.adapters.http.api import shutdown_budget
from coinclock.adapters.upstream.fetcher import UpstreamFetcher
from coinclock.domain.errors import FetchCancelledError, FetchExhaustedError
from coinclock.domain.models import RetryPolicy

GET = 'coinclock.adapters.upstream.fetcher.requests.get'
CATALOG = [{"id": "btc", "current_price": 771.4}, {"id": "eth", "current_price": 0.0}]


def make_fetcher(**policy):
    return UpstreamFetcher(base_url="http://upstream.test/", timeout=5, retry_policy=RetryPolicy(**policy))


class TestUrl:
    def test_url_uses_epoch_millis_of_simulated_date(self):
        fetcher = make_fetcher()
        assert fetcher.url_for(date(2014, 1, 1)) == "http://upstream.test/coins/1388534400000"
        assert fetcher.url_for(date(2014, 1, 2)) == "http://upstream.test/coins/1388620800000"

    def test_defaults_from_settings(self):
        fetcher = UpstreamFetcher()
        assert fetcher.base_url.startswith("http")
        assert not fetcher.base_url.endswith("/")
        assert fetcher.retry_policy.delay_seconds == 1.0
        assert fetcher.retry_policy.max_attempts is None

    @pytest.mark.parametrize("timeout", [1, 10, 60])
    def test_shutdown_budget_covers_connect_plus_read(self, timeout):
        fetcher = UpstreamFetcher(base_url="http://upstream.test", timeout=timeout)
        connect, read = fetcher.request_timeout
        assert shutdown_budget(timeout) > connect + read


class TestFetchSuccess:
    @patch(GET)
    def test_returns_coins_in_upstream_order(self, mock_get, ok_response, recording_event):
        mock_get.return_value = ok_response(CATALOG)

        snapshot = make_fetcher().fetch(date(2014, 1, 1), recording_event)

        assert [c.id for c in snapshot] == ["btc", "eth"]
        assert snapshot[0].data["current_price"] == 771.4
        mock_get.assert_called_once_with("http://upstream.test/coins/1388534400000", timeout=(5, 5))
        assert recording_event.waits == []

    @patch(GET)
    def test_empty_array_is_a_valid_catalog(self, mock_get, ok_response):
        mock_get.return_value = ok_response([])
        assert make_fetcher().fetch(date(2014, 1, 1)) == ()


class TestRetry:
    @pytest.mark.parametrize("failures", [1, 2, 5])
    @patch(GET)
    def test_k_failures_then_success_makes_k_plus_one_attempts(self, mock_get, failures, ok_response, recording_event):
        mock_get.side_effect = [requests.exceptions.ConnectionError("refused")] * failures + [ok_response(CATALOG)]

        snapshot = make_fetcher().fetch(date(2014, 1, 1), recording_event)

        assert len(snapshot) == 2
        assert mock_get.call_count == failures + 1
        assert recording_event.waits == [1.0] * failures

    @patch(GET)
    def test_timeout_is_retried(self, mock_get, ok_response, recording_event):
        mock_get.side_effect = [requests.exceptions.Timeout(), ok_response(CATALOG)]

        make_fetcher().fetch(date(2014, 1, 1), recording_event)

        assert mock_get.call_count == 2

    @patch(GET)
    def test_http_error_status_is_retried(self, mock_get, ok_response, recording_event):
        bad = Mock()
        bad.raise_for_status.side_effect = requests.exceptions.HTTPError("503 Service Unavailable")
        mock_get.side_effect = [bad, ok_response(CATALOG)]

        snapshot = make_fetcher().fetch(date(2014, 1, 1), recording_event)

        assert [c.id for c in snapshot] == ["btc", "eth"]
        assert recording_event.waits == [1.0]

    @patch(GET)
    def test_invalid_json_is_retried_not_published_empty(self, mock_get, ok_response, recording_event):
        broken = Mock()
        broken.raise_for_status.return_value = None
        broken.json.side_effect = ValueError("Expecting value")
        mock_get.side_effect = [broken, ok_response(CATALOG)]

        snapshot = make_fetcher().fetch(date(2014, 1, 1), recording_event)

        assert len(snapshot) == 2
        assert mock_get.call_count == 2

    @pytest.mark.parametrize("payload", [
        {"coins": CATALOG},  # object instead of array
        [{"id": "btc"}, {"name": "no id"}],  # entry without id
        [{"id": "btc"}, "eth"],  # entry that is not an object
        [{"id": ""}],  # empty id
    ])
    @patch(GET)
    def test_malformed_catalog_is_retried(self, mock_get, payload, ok_response, recording_event):
        mock_get.side_effect = [ok_response(payload), ok_response(CATALOG)]

        snapshot = make_fetcher().fetch(date(2014, 1, 1), recording_event)

        assert [c.id for c in snapshot] == ["btc", "eth"]
        assert recording_event.waits == [1.0]

    @patch(GET)
    def test_exponential_backoff_is_capped(self, mock_get, ok_response, recording_event):
        mock_get.side_effect = [requests.exceptions.ConnectionError()] * 4 + [ok_response(CATALOG)]

        make_fetcher(delay_seconds=1.0, backoff_factor=2.0, max_delay_seconds=3.0).fetch(
            date(2014, 1, 1), recording_event
        )

        assert recording_event.waits == [1.0, 2.0, 3.0, 3.0]

    @patch(GET)
    def test_bounded_attempts_raise_exhausted(self, mock_get, recording_event):
        mock_get.side_effect = requests.exceptions.ConnectionError("down")

        with pytest.raises(FetchExhaustedError) as excinfo:
            make_fetcher(max_attempts=3).fetch(date(2014, 1, 1), recording_event)

        assert excinfo.value.attempts == 3
        assert mock_get.call_count == 3
        assert recording_event.waits == [1.0, 1.0]

    @patch(GET)
    def test_long_outage_with_backoff_stays_at_cap(self, mock_get, recording_event):
        mock_get.side_effect = requests.exceptions.ConnectionError("down")

        with pytest.raises(FetchExhaustedError) as excinfo:
            make_fetcher(backoff_factor=2.0, max_delay_seconds=60.0, max_attempts=1100).fetch(
                date(2014, 1, 1), recording_event
            )

        assert excinfo.value.attempts == 1100
        assert len(recording_event.waits) == 1099
        assert recording_event.waits[:7] == [1.0, 2.0, 4.0, 8.0, 16.0, 32.0, 60.0]
        assert set(recording_event.waits[6:]) == {60.0}


class TestCancellation:
    @patch(GET)
    def test_already_stopped_makes_no_request(self, mock_get, recording_event):
        recording_event.set()

        with pytest.raises(FetchCancelledError):
            make_fetcher().fetch(date(2014, 1, 1), recording_event)

        mock_get.assert_not_called()

    @patch(GET)
    def test_stop_during_retry_wait_aborts(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError("down")
        event = RecordingEvent()
        event._on_wait = lambda timeout: event.set()

        with pytest.raises(FetchCancelledError):
            make_fetcher().fetch(date(2014, 1, 1), event)

        assert mock_get.call_count == 1
        assert event.waits == [1.0]
