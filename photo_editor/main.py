# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import logging
import os
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from photo_editor import PROJECT_ROOT
from photo_editor.api.api import api_router
from photo_editor.core.config import settings
from photo_editor.core.exceptions import (
    CustomHTTPException,
    RequestValidationError,
    http_exception_handler,
    python_exception_handler,
    validation_exception_handler,
)
from photo_editor.core.logging import setup_logging
from photo_editor.db.session import engine
from photo_editor.models import *  # noqa: F401,F403

# Initialize logging at module level for use in lifespan
setup_logging()
_logger = logging.getLogger(__name__)


def _alembic_config():
    from alembic.config import Config as AlembicConfig

    alembic_cfg = AlembicConfig(os.path.join(PROJECT_ROOT, "alembic.ini"))
    alembic_cfg.set_main_option("script_location", os.path.join(PROJECT_ROOT, "alembic"))
    # Keep the logging set up by setup_logging()
    alembic_cfg.attributes["configure_logger"] = False
    return alembic_cfg


def run_migrations() -> None:
    """Upgrade the database schema to the latest revision"""
    from alembic import command

    command.upgrade(_alembic_config(), "head")


def check_migration_status() -> None:
    from alembic.runtime.migration import MigrationContext
    from alembic.script import ScriptDirectory

    script = ScriptDirectory.from_config(_alembic_config())
    with engine.connect() as connection:
        context = MigrationContext.configure(connection)
        current_rev = context.get_current_revision()
        head_rev = script.get_current_head()

    if current_rev != head_rev:
        _logger.warning(
            f"Database migration pending: current={current_rev}, latest={head_rev}. "
            "Run 'alembic upgrade head' manually in production."
        )
    else:
        _logger.info("Database schema is up to date")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.
    Handles startup and shutdown events.
    """
    logger = _logger

    # ==================== STARTUP ====================
    if settings.ENVIRONMENT == "development" and settings.DB_AUTO_MIGRATE:
        logger.info("Running Alembic migrations...")
        try:
            run_migrations()
            logger.info("✓ Alembic migrations completed")
        except Exception as e:
            logger.error(f"✗ Unexpected error running Alembic migrations: {e}")
            raise
    elif settings.ENVIRONMENT == "production":
        logger.warning(
            "Running in production mode. Database migrations must be run manually. "
            "Please execute 'alembic upgrade head' to apply pending migrations."
        )
        try:
            check_migration_status()
        except Exception as e:
            logger.warning(f"Could not check migration status: {e}")
    else:
        logger.info("Alembic auto-upgrade is disabled")

    if not (settings.REPLICATE_WEBHOOK_URL or settings.WEBHOOK_BASE_URL):
        logger.warning(
            "No webhook URL configured, task outcomes are only discovered by polling"
        )

    yield

    # ==================== SHUTDOWN ====================
    engine.dispose()
    logger.info("✓ Database connections released")


def create_app():
    # Toggle API docs/OpenAPI via environment (settings.ENABLE_API_DOCS, default True)
    enable_docs = settings.ENABLE_API_DOCS
    openapi_url = f"{settings.API_PREFIX}/openapi.json" if enable_docs else None
    docs_url = f"{settings.API_PREFIX}/docs" if enable_docs else None
    redoc_url = f"{settings.API_PREFIX}/redoc" if enable_docs else None

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="AI Photo Editor Backend API",
        version=settings.VERSION,
        openapi_url=openapi_url,
        docs_url=docs_url,
        redoc_url=redoc_url,
        lifespan=lifespan,
    )

    logger = _logger

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        # Skip logging for health check/probe requests (root path)
        if request.url.path == "/":
            return await call_next(request)

        # Use first 8 characters of UUID as request ID
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id

        start_time = time.time()

        from photo_editor.core.security import get_user_id_from_request

        user_id = get_user_id_from_request(request)
        client_ip = request.client.host if request.client else "unknown"

        logger.info(
            f"request : {request.method} {request.url.path} {request.query_params} {request_id} {client_ip} [{user_id}]"
        )

        response = await call_next(request)
        process_time = (time.time() - start_time) * 1000

        logger.info(
            f"response: {request.method} {request.url.path} {request.query_params} {request_id} {client_ip} [{user_id}] {response.status_code} {process_time:.2f}ms"
        )

        # Add request ID to response headers for client-side tracking
        response.headers["X-Request-ID"] = request_id

        return response

    # Setup CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(CustomHTTPException, http_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, python_exception_handler)

    # Include API routes
    app.include_router(api_router, prefix=settings.API_PREFIX)

    # Serve locally stored generated images
    if settings.STORAGE_BACKEND == "local" and settings.STORAGE_SERVE_LOCAL:
        os.makedirs(settings.STORAGE_LOCAL_DIR, exist_ok=True)
        app.mount(
            "/uploads",
            StaticFiles(directory=settings.STORAGE_LOCAL_DIR),
            name="uploads",
        )

    return app


app = create_app()


# Root path
@app.get("/")
async def root():
    """
    Root path, returns API information
    """
    return {
        "name": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "api_prefix": settings.API_PREFIX,
        "docs_url": f"{settings.API_PREFIX}/docs",
    }
