"""
app.py: FastAPI application factory and startup lifecycle.

This is the ASGI application object imported by uvicorn.
It wires the feed source and aggregation engine, registers routers, and
performs the first feed refresh on startup.

Usage (via launcher):
    python main.py

Usage (direct uvicorn):
    uvicorn app:app --reload
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from studyspace.controllers.spaces_controller import router as spaces_router
from studyspace.repository.feed_repository import FeedSource, build_feed_source
from studyspace.services.space_engine import RefreshStatus, SpaceAggregationEngine
from studyspace.utils.config import Settings, get_settings
from studyspace.utils.logger import get_logger


logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    feed_source: Optional[FeedSource] = None,
) -> FastAPI:
    """
    Build and wire the FastAPI application.

    The engine is constructed here and exposed through app.state.
    Every dependency is traceable from this function.
    """
    settings = settings or get_settings()
    source = feed_source or build_feed_source(settings)
    engine = SpaceAggregationEngine(source=source, settings=settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Load the first snapshot before accepting requests."""
        await _startup(app)
        yield

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.include_router(spaces_router)

    app.state.settings = settings
    app.state.feed_source = source
    app.state.space_engine = engine

    return app


async def _startup(app: FastAPI) -> None:
    """
    Initial refresh. A failure is logged and the service starts empty;
    POST /spaces/refresh retries it.
    """
    engine: SpaceAggregationEngine = app.state.space_engine

    logger.info("Startup: loading study space feeds")
    outcome = await engine.refresh()
    if outcome.status is RefreshStatus.FAILED:
        logger.warning("Startup: initial refresh failed | error=%s", outcome.error)
        return

    logger.info(
        "Startup complete | version=%s | records=%s",
        outcome.version,
        outcome.record_count,
    )


# Module-level app object for uvicorn
app = create_app()
