"""FastAPI application configuration module."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

# Internal imports
from ..config.cors import get_cors_config
from ..config.settings import Settings
from ..db import Database, DatabaseConfig
from ..utils.logging_config import setup_logging
from .errors import register_error_handlers
from .routes import events, health

API_PREFIX = "/api/v3/app"

# Set up logging
setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    # Startup
    database: Database = app.state.database
    try:
        database.connect()
    except Exception as e:
        # No point serving requests without a database
        logger.error(f"Startup failed: {e}")
        raise
    logger.info(f"API base URL: {API_PREFIX}")
    yield
    # Shutdown
    database.close()

def create_application(
    settings: Optional[Settings] = None,
    database_config: Optional[DatabaseConfig] = None
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or Settings()
    database = Database(database_config or DatabaseConfig.from_settings(settings))

    app = FastAPI(
        title="Events API",
        description="API for creating, listing, updating and deleting events",
        version="1.0.0",
        docs_url=None if settings.is_production else '/api/docs',
        redoc_url=None if settings.is_production else '/api/redoc',
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.database = database

    # Configure CORS
    app.add_middleware(CORSMiddleware, **get_cors_config(settings))

    register_error_handlers(app, settings.is_production)

    # Include health check router without prefix
    app.include_router(health.router)

    # Include routers with prefix
    app.include_router(events.router, prefix=API_PREFIX)

    # Serve uploaded files
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")

    return app
