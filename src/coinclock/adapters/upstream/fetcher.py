# src/coinclock/adapters/upstream/fetcher.py
"""
Upstream Fetcher - Historical Coin Catalog Client

This module implements the client for the upstream price source. For a
simulated date it requests GET {base_url}/coins/{epochMillis}, decodes the
JSON array into coins and returns the snapshot. Transient failures and
malformed payloads are retried according to a RetryPolicy; a stop event
aborts the retry loop at the next retry boundary.

Files that USE this module:
- coinclock.application.refresh_daemon (fetches one snapshot per tick)
- coinclock.app (builds the fetcher from settings)
- tests.test_fetcher (unit tests)

Files that this module USES:
- coinclock.config (settings for base URL, timeout and retry policy)
- coinclock.domain.models (Coin decoding, RetryPolicy)
- coinclock.domain.errors (fetch error taxonomy)
"""
from __future__ import annotations

import logging
import threading
from datetime import date
from typing import Optional, Tuple

import requests

from coinclock.application.virtual_clock import to_epoch_millis
from coinclock.config import settings
from coinclock.domain.errors import (
    FetchCancelledError,
    FetchExhaustedError,
    TransientFetchError,
    UpstreamDecodeError,
)
from coinclock.domain.models import CatalogSnapshot, RetryPolicy, snapshot_from_json
from coinclock.shared.validators import normalize_base_url

log = logging.getLogger(__name__)


class UpstreamFetcher:
    """
    Client for the upstream coin catalog, keyed by simulated date.

    The upstream answers with a JSON array of coin objects, each carrying a
    unique string "id"; everything else in the objects is passed through.

    The stop event is only consulted between attempts. A request already on
    the wire is not interrupted; it is bounded by the (connect, read) timeout
    pair instead, and the app waits shutdown_budget() seconds for it, which
    is sized above connect plus read.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        """
        Initialize the upstream fetcher.

        Args:
            base_url: Optional upstream URL (defaults to settings.upstream_base_url)
            timeout: Optional HTTP timeout in seconds (defaults to settings.http_timeout_seconds)
            retry_policy: Optional retry policy (defaults to settings.retry_policy)
        """
        self.base_url = normalize_base_url(base_url or settings.upstream_base_url)
        self.timeout = timeout or settings.http_timeout_seconds
        self.retry_policy = retry_policy or settings.retry_policy

    @property
    def request_timeout(self) -> Tuple[float, float]:
        """(connect, read) timeout passed to requests for every attempt."""
        return (self.timeout, self.timeout)

    def url_for(self, sim_date: date) -> str:
        """Build the catalog URL for a simulated date."""
        return f"{self.base_url}/coins/{to_epoch_millis(sim_date)}"

    def _get_once(self, url: str) -> CatalogSnapshot:
        """
        Perform a single request and decode the body.

        Raises:
            TransientFetchError: On connection errors, timeouts or HTTP error statuses
            UpstreamDecodeError: If the body is not a JSON array of coin objects
        """
        try:
            resp = requests.get(url, timeout=self.request_timeout)
            resp.raise_for_status()
        except requests.exceptions.Timeout:
            raise TransientFetchError(f"Upstream timeout after {self.timeout}s")
        except requests.exceptions.RequestException as e:
            raise TransientFetchError(f"Upstream request failed: {e}")

        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamDecodeError(f"Upstream returned invalid JSON: {e}")

        try:
            return snapshot_from_json(data)
        except ValueError as e:
            raise UpstreamDecodeError(f"Upstream returned malformed catalog: {e}")

    def fetch(self, sim_date: date, stop_event: Optional[threading.Event] = None) -> CatalogSnapshot:
        """
        Fetch the coin catalog for a simulated date, retrying transient failures.

        Args:
            sim_date: Simulated date to request
            stop_event: Optional shutdown signal; checked before every attempt
                and used for every inter-attempt wait

        Returns:
            The decoded snapshot, in upstream order

        Raises:
            FetchCancelledError: If stop_event is set while retrying
            FetchExhaustedError: If the retry policy has a max_attempts and it is reached
        """
        if stop_event is None:
            stop_event = threading.Event()

        url = self.url_for(sim_date)
        policy = self.retry_policy
        attempts = 0

        while True:
            if stop_event.is_set():
                raise FetchCancelledError(f"Fetch for {sim_date.isoformat()} cancelled")

            attempts += 1
            try:
                snapshot = self._get_once(url)
            except TransientFetchError as e:
                log.warning("Upstream attempt %d for %s failed: %s", attempts, sim_date.isoformat(), e)
                if policy.exhausted(attempts):
                    log.error("Giving up on %s after %d attempts", url, attempts)
                    raise FetchExhaustedError(url, attempts, e) from e
                if stop_event.wait(policy.delay_for(attempts)):
                    raise FetchCancelledError(
                        f"Fetch for {sim_date.isoformat()} cancelled after {attempts} attempts"
                    )
                continue

            if attempts > 1:
                log.info("Upstream recovered after %d attempts for %s", attempts, sim_date.isoformat())
            log.debug("Fetched %d coins from %s", len(snapshot), url)
            return snapshot
