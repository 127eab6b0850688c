"""Application lifespan: startup and shutdown.

Only wiring of infrastructure (logging, optional permission cache, DB engine
dispose); no business logic here.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from entitlements.core.config import get_settings
from entitlements.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    The Redis cache is connected only when permission_cache_enabled is set;
    otherwise app.state.cache is None and every check reads the store.
    """
    settings = get_settings()
    setup_logging()

    # ---- Startup ----
    if settings.permission_cache_enabled:
        from entitlements.infrastructure.cache.redis_cache import CacheService

        cache = CacheService()
        await cache.connect()
        app.state.cache = cache
    else:
        app.state.cache = None
    logger.info(
        "%s %s started (permission cache %s)",
        settings.app_name,
        settings.app_version,
        "on" if app.state.cache is not None else "off",
    )

    yield

    # ---- Shutdown ----
    if getattr(app.state, "cache", None) is not None:
        await app.state.cache.disconnect()
        logger.info("Cache disconnected")

    from entitlements.infrastructure.persistence import database

    if getattr(database, "engine", None) is not None:
        await database.engine.dispose()
        logger.info("Database engine disposed")
