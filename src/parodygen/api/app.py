"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from parodygen.api.dependencies import get_retention_scheduler
from parodygen.api.middleware import parody_error_handler
from parodygen.api.routes import generate, status
from parodygen.config import get_settings
from parodygen.models.errors import ParodyError
from parodygen.storage.retention import sweep_expired

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    for directory in (settings.cache_dir, settings.temp_dir, settings.output_dir):
        directory.mkdir(parents=True, exist_ok=True)
    # Deletions scheduled before a restart are gone; catch their artifacts by age.
    removed = sweep_expired(settings.output_dir, settings.output_retention_seconds)
    if removed:
        logger.info("Removed %d expired artifacts at startup", removed)

    scheduler = get_retention_scheduler()
    scheduler.start()
    try:
        yield
    finally:
        scheduler.shutdown()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Parody Song Generator",
        description="Cuts YouTube audio segments and merges them into one track",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "X-Run-Id"],
    )

    # Error handlers
    app.add_exception_handler(ParodyError, parody_error_handler)

    # Routes
    app.include_router(generate.router)
    app.include_router(status.router)

    @app.get("/health")
    async def health():
        return {"status": "ok", "message": "Parody Song Generator API is running"}

    return app


app = create_app()
