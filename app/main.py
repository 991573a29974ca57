"""FastAPI application entrypoint for the Jobs API."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool

from app.api.routes import build_router
from app.core.config import Settings
from app.core.config import get_settings
from app.core.errors import register_error_handlers
from app.core.logging_config import setup_logging
from app.db.base import Database

logger = logging.getLogger(__name__)


def create_app(*, settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """Build the application with its database context attached to ``app.state``."""
    settings = settings or get_settings()
    database = database or Database(settings.database_url, schema=settings.database_schema)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        await run_in_threadpool(database.connect)
        yield
        await run_in_threadpool(database.dispose)

    app = FastAPI(title="Jobs API", lifespan=lifespan)
    app.state.database = database
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(build_router())

    @app.get("/health")
    def health() -> dict[str, str]:
        """Health check stub endpoint for service readiness."""
        return {"status": "ok"}

    return app


app = create_app()


def run() -> None:
    """Console entry point: configure logging and serve the API with uvicorn."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.json_logs)
    logger.info("Starting Jobs API with settings=%s", settings.safe_for_logging())
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
