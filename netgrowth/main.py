"""
Network Growth Engine FastAPI application entry point.

Pipeline: interactions -> relationship score -> status transitions;
priority score -> daily queue -> operator actions
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from netgrowth import __version__
from netgrowth.config import get_settings
from netgrowth.db.session import check_db_connection, engine

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    logger.info("Network Growth Engine starting")
    try:
        try:
            check_db_connection()
            logger.info("Database connection verified")
        except Exception as e:
            logger.critical("Database unreachable: %s", e)
            raise
        yield
    finally:
        logger.info("Network Growth Engine shutting down")
        engine.dispose()
        logger.info("Database connection pool closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    from netgrowth.api.contacts import router as contacts_router
    from netgrowth.api.queue import router as queue_router
    from netgrowth.api.scoring_config import router as scoring_config_router

    app.include_router(queue_router, prefix="/api/queue", tags=["queue"])
    app.include_router(contacts_router, prefix="/api/contacts", tags=["contacts"])
    app.include_router(
        scoring_config_router, prefix="/api/scoring-config", tags=["scoring-config"]
    )

    # Internal job endpoints (cron/scripts)
    from netgrowth.api.internal import router as internal_router

    app.include_router(internal_router, tags=["internal"])

    @app.get("/health")
    def health() -> dict:
        """Health check endpoint. Confirms DB connectivity."""
        from sqlalchemy import text

        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return {
                "status": "ok",
                "version": __version__,
                "database": "connected",
            }
        except Exception:
            from fastapi.responses import JSONResponse

            return JSONResponse(
                status_code=503,
                content={
                    "status": "unhealthy",
                    "version": __version__,
                    "database": "disconnected",
                },
            )

    return app


app = create_app()
