"""iKuai Exporter - FastAPI Application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from . import __version__
from .cache import VlanCache
from .config import AppConfig, get_config
from .metrics.collector import MetricsCollector
from .polling.ikuai import IKuaiClient
from .polling.refresh import VlanRefresher
from .polling.scheduler import RefreshScheduler
from .routers import metrics_router, vlans_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events."""
    config: AppConfig = app.state.config

    # Startup
    await app.state.client.connect()

    if config.refresh.warm_up:
        try:
            await app.state.refresher.load_all()
        except Exception:
            logger.exception("Initial VLAN load failed")

    app.state.scheduler.start()
    logger.info("iKuai exporter %s started", __version__)

    yield

    # Shutdown
    await app.state.scheduler.stop()
    await app.state.client.close()


def create_app(config: AppConfig | None = None, client: IKuaiClient | None = None) -> FastAPI:
    """Build the application and wire the cache into its reader and writer."""
    config = config or get_config()
    client = client or IKuaiClient(timeout=config.ikuai.timeout)

    cache = VlanCache()
    refresher = VlanRefresher(
        client,
        cache,
        page_size=config.refresh.page_size,
        interval=config.refresh.interval_seconds,
        retry_delay=config.refresh.retry_delay_seconds,
    )

    app = FastAPI(
        title="iKuai Exporter",
        description="Prometheus exporter for iKuai routers",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.client = client
    app.state.cache = cache
    app.state.refresher = refresher
    app.state.collector = MetricsCollector(client, cache)
    app.state.scheduler = RefreshScheduler(refresher, initial_delay=config.refresh.initial_delay_seconds)

    app.include_router(metrics_router, tags=["metrics"])
    app.include_router(vlans_router, tags=["vlans"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": "ikuai-exporter",
            "cached_vlans": len(cache),
            "refresh_running": app.state.scheduler.running,
        }

    return app
