# src/coinclock/adapters/http/api.py
"""
HTTP API - Read-only FastAPI Routes over the Coin Catalog

FastAPI application factory. Handlers only read from the catalog and the
clock; the refresh daemon is started and stopped by the app lifespan.

Routes
------
GET /                   Liveness check
GET /coins              Current snapshot
GET /coins/{coin_id}    One coin by id, 404 if absent (ids may contain slashes)
GET /clock              Current simulated date
GET /health             Refresh daemon status

Files that USE this module:
- coinclock.app (create_app, served by uvicorn)
- tests.test_api (TestClient tests)

Files that this module USES:
- coinclock.application (CoinCatalog, VirtualClock, RefreshDaemon)
- coinclock.adapters.persistence.coin_repository (closed on shutdown)
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from fastapi import Depends, FastAPI, HTTPException, Request

from coinclock import __version__
from coinclock.adapters.persistence.coin_repository import CoinRepository
from coinclock.application.catalog import CoinCatalog
from coinclock.application.refresh_daemon import RefreshDaemon
from coinclock.application.virtual_clock import VirtualClock
from coinclock.domain.errors import CoinNotFoundError

logger = logging.getLogger(__name__)

NOT_FOUND_DETAIL = "Requested coin doesn't exist!"


def shutdown_budget(http_timeout: float) -> float:
    """
    Seconds to wait for the daemon thread on shutdown.

    An in-flight upstream request can take a connect timeout plus a read
    timeout before the thread sees the stop event.
    """
    return 2 * http_timeout + 5.0


SHUTDOWN_TIMEOUT = shutdown_budget(10)


# ── Dependencies ──────────────────────────────────────────────────────────────


def get_catalog(request: Request) -> CoinCatalog:
    return request.app.state.catalog


def get_clock(request: Request) -> VirtualClock:
    return request.app.state.clock


def get_daemon(request: Request) -> Optional[RefreshDaemon]:
    return request.app.state.daemon


# ── App factory ───────────────────────────────────────────────────────────────


def create_app(
    catalog: CoinCatalog,
    clock: VirtualClock,
    daemon: Optional[RefreshDaemon] = None,
    repository: Optional[CoinRepository] = None,
    shutdown_timeout: float = SHUTDOWN_TIMEOUT,
) -> FastAPI:
    """
    Build the FastAPI application around already-wired components.

    Args:
        catalog: Catalog the handlers read from
        clock: Virtual clock reported by /clock
        daemon: Optional refresh daemon, started on startup and stopped on shutdown
        repository: Optional repository, closed on shutdown after the daemon stops
        shutdown_timeout: Seconds to wait for the daemon thread on shutdown

    Returns:
        Configured FastAPI instance
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        if daemon is not None:
            daemon.start()
        logger.info("API ready, simulated date %s", clock.now().isoformat())

        yield

        if daemon is not None:
            logger.info("Stopping price management daemon")
            daemon.stop(timeout=shutdown_timeout)
        if repository is not None:
            repository.close()
        logger.info("API shut down")

    app = FastAPI(
        title="CoinClock",
        version=__version__,
        description="Historical cryptocurrency prices served on a virtual clock.",
        lifespan=lifespan,
    )
    app.state.catalog = catalog
    app.state.clock = clock
    app.state.daemon = daemon

    @app.get("/", tags=["health"], summary="Health check")
    def health_check() -> dict:
        return {"status": "ok", "version": __version__}

    @app.get("/coins", tags=["coins"], summary="All coins for the current simulated day")
    def list_coins(catalog: CoinCatalog = Depends(get_catalog)) -> list[dict[str, Any]]:
        return [coin.to_json() for coin in catalog.snapshot()]

    @app.get("/coins/{coin_id:path}", tags=["coins"], summary="One coin by id")
    def get_coin(coin_id: str, catalog: CoinCatalog = Depends(get_catalog)) -> dict[str, Any]:
        """
        Return the coin payload for ``coin_id``.

        Any id the catalog can hold is accepted; the lookup alone decides.

        Raises:
            HTTPException 404: Coin not in the current snapshot.
        """
        try:
            coin = catalog.lookup(coin_id)
        except CoinNotFoundError:
            raise HTTPException(status_code=404, detail=NOT_FOUND_DETAIL)
        return coin.to_json()

    @app.get("/clock", tags=["clock"], summary="Current simulated date")
    def get_clock_view(clock: VirtualClock = Depends(get_clock)) -> dict[str, Any]:
        return {
            "current_date": clock.now().isoformat(),
            "epoch_millis": clock.now_millis(),
            "day_duration_seconds": clock.day_duration.total_seconds(),
        }

    @app.get("/health", tags=["health"], summary="Refresh daemon status")
    def daemon_health(
        catalog: CoinCatalog = Depends(get_catalog),
        clock: VirtualClock = Depends(get_clock),
        daemon: Optional[RefreshDaemon] = Depends(get_daemon),
    ) -> dict[str, Any]:
        body: dict[str, Any] = {
            "catalog_size": len(catalog),
            "current_date": clock.now().isoformat(),
            "daemon": None,
        }
        if daemon is not None:
            status = daemon.status()
            body["daemon"] = {
                "running": status.running,
                "ticks": status.ticks,
                "last_refresh": status.last_refresh.isoformat() if status.last_refresh else None,
                "last_error": status.last_error,
            }
        return body

    return app
