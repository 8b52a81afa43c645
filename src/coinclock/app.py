# src/coinclock/app.py
"""
Application Entry Point - Service Wiring and Startup

This module serves as the composition root for CoinClock.
It wires repository, catalog, clock, fetcher and daemon, then serves the
HTTP API with uvicorn. Uvicorn's signal handling runs the app lifespan
teardown, which stops the daemon and closes the repository.

Files that USE this module:
- coinclock console script (pyproject.toml entry point)
- python -m coinclock

Files that this module USES:
- coinclock.shared.logging_conf (setup_logging for logging configuration)
- coinclock.config (settings for configuration management)
- coinclock.adapters.* (fetcher, repository, FastAPI app factory)
- coinclock.application.* (clock, catalog, daemon)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations for forward references

import logging  # Standard library for logging messages and errors
import sys  # System-specific parameters and functions for exit codes
from typing import Optional

import uvicorn  # ASGI server for the FastAPI app
from fastapi import FastAPI

from coinclock.adapters.http.api import create_app, shutdown_budget  # FastAPI application factory
from coinclock.adapters.persistence.coin_repository import CoinRepository  # Seed catalog source
from coinclock.adapters.upstream.fetcher import UpstreamFetcher  # Upstream price client
from coinclock.application.catalog import CoinCatalog
from coinclock.application.refresh_daemon import RefreshDaemon
from coinclock.application.virtual_clock import VirtualClock
from coinclock.config import Settings, settings as default_settings
from coinclock.domain.errors import RepositoryError
from coinclock.shared.logging_conf import setup_logging  # Configure logging with file rotation


def build_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Wire every component from settings and return the FastAPI app.

    The catalog is seeded from the repository before the daemon exists, so
    the first tick always starts from the seed (or an empty catalog).
    """
    settings = settings or default_settings
    logger = logging.getLogger(__name__)

    repository = CoinRepository(settings.coins_file)
    catalog = CoinCatalog(repository.load_initial())
    clock = VirtualClock(settings.initial_simulated_date, settings.day_duration)
    fetcher = UpstreamFetcher(
        base_url=settings.upstream_base_url,
        timeout=settings.http_timeout_seconds,
        retry_policy=settings.retry_policy,
    )
    daemon = RefreshDaemon(fetcher=fetcher, catalog=catalog, clock=clock)

    logger.info(
        "Wired service: upstream=%s, start=%s, day=%ss, seed coins=%d",
        fetcher.base_url,
        clock.now().isoformat(),
        settings.day_duration_seconds,
        len(catalog),
    )
    return create_app(
        catalog=catalog,
        clock=clock,
        daemon=daemon,
        repository=repository,
        shutdown_timeout=shutdown_budget(settings.http_timeout_seconds),
    )


def main() -> None:
    """
    Initialize and start the service.

    This function:
    1. Sets up logging from settings
    2. Wires and seeds the components
    3. Serves the API until SIGINT/SIGTERM
    """
    settings = default_settings

    setup_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        log_dir=settings.log_dir,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
        log_stdout=settings.log_stdout,
    )
    logger = logging.getLogger(__name__)

    try:
        app = build_app(settings)
    except RepositoryError as e:
        logger.error("Cannot load initial coin catalog: %s", e)
        sys.exit(1)

    logger.info("Starting API on %s:%d", settings.listen_host, settings.listen_port)
    try:
        uvicorn.run(
            app,
            host=settings.listen_host,
            port=settings.listen_port,
            log_config=None,  # keep the handlers installed by setup_logging
        )
    except KeyboardInterrupt:
        logger.info("Stopped by user (KeyboardInterrupt)")
    except Exception as e:
        logger.exception("Unexpected error during server operation: %s (type: %s)", e, type(e).__name__)
        raise


if __name__ == "__main__":
    main()
