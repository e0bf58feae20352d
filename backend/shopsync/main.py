"""
PURPOSE: Main FastAPI application factory and lifecycle management for shopsync.

Initializes the FastAPI application with:
- API routers (Shopify webhooks, dashboard refresh)
- Rate limiter state for slowapi
- Exception handlers for common errors
- Startup events (logging, configuration warnings, Alembic migrations)
- Shutdown events (database engine disposal)
- Metadata from version.json
"""

import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from shopsync.core.rate_limit import limiter
from shopsync.api import api_router
from shopsync.config.settings import settings
from shopsync.utils.logger import setup_logging, get_logger
from shopsync.version import get_version


logger = get_logger(__name__)


# ════════════════════════════════════════════════════════════════
# Lifecycle Events
# ════════════════════════════════════════════════════════════════


def run_migrations() -> None:
    """
    PURPOSE: Upgrade the database schema to the latest Alembic revision.

    CALLED BY: on_startup() when RUN_MIGRATIONS_ON_STARTUP is enabled
    """
    from alembic.config import Config
    from alembic import command

    alembic_cfg = Config(settings.ALEMBIC_CONFIG)
    command.upgrade(alembic_cfg, "head")


async def on_startup(app: FastAPI) -> None:
    """
    PURPOSE: Execute startup tasks.

    CALLED BY: FastAPI lifespan startup

    Tasks:
        1. Setup logging with configured level
        2. Warn about missing webhook configuration
        3. Run Alembic migrations
    """
    setup_logging(settings.LOG_LEVEL)
    logger.info(
        "application_startup_starting",
        version=app.version,
        log_level=settings.LOG_LEVEL,
        store_id=settings.SHOPIFY_STORE_ID,
    )

    missing = settings.get_missing_settings()
    if missing:
        logger.warning(
            "webhook_settings_missing",
            message="Webhooks will be rejected until these are configured.",
            settings=missing,
        )

    if settings.RUN_MIGRATIONS_ON_STARTUP:
        # alembic/env.py calls asyncio.run(), so it must not run on the server loop
        try:
            await asyncio.to_thread(run_migrations)
            logger.info("alembic_upgrade_complete")
        except Exception as e:
            logger.warning("alembic_upgrade_skipped", error=str(e))

    logger.info("application_startup_complete")


async def on_shutdown() -> None:
    """
    PURPOSE: Execute shutdown tasks to gracefully close resources.

    CALLED BY: FastAPI lifespan shutdown
    """
    from shopsync.db.engine import engine

    logger.info("application_shutdown_starting")
    await engine.dispose()
    logger.info("application_shutdown_complete")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    PURPOSE: Manage application lifespan with startup and shutdown events.

    CALLED BY: FastAPI during application startup and shutdown

    Args:
        app: FastAPI application instance

    Yields:
        None
    """
    # Startup
    await on_startup(app)

    yield

    # Shutdown
    await on_shutdown()


# ════════════════════════════════════════════════════════════════
# Exception Handlers
# ════════════════════════════════════════════════════════════════


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    PURPOSE: Handle Pydantic validation errors with consistent JSON response.

    CALLED BY: FastAPI when request validation fails

    Args:
        request: HTTP request that failed validation
        exc: RequestValidationError with validation details

    Returns:
        JSONResponse: Formatted error response with validation details
    """
    logger.warning(
        "request_validation_failed",
        path=request.url.path,
        method=request.method,
        error_count=len(exc.errors())
    )

    safe_errors = jsonable_encoder(
        exc.errors(),
        custom_encoder={
            ValueError: lambda e: str(e),
            Exception: lambda e: str(e),
        },
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Request validation failed",
            "errors": safe_errors,
        },
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    PURPOSE: Handle unexpected exceptions with logging and safe error response.

    CALLED BY: FastAPI exception handler middleware

    Args:
        request: HTTP request that raised exception
        exc: Exception that was raised

    Returns:
        JSONResponse: Safe error response without exposing internals
    """
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exception_type=type(exc).__name__
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


# ════════════════════════════════════════════════════════════════
# FastAPI Application Factory
# ════════════════════════════════════════════════════════════════


def create_app() -> FastAPI:
    """
    PURPOSE: Create and configure FastAPI application with all routers, middleware, and handlers.

    CALLED BY: Application entrypoint (uvicorn, docker, etc)

    Returns:
        FastAPI: Configured FastAPI application ready to run
    """
    try:
        version_data = get_version()
        version = version_data.get("version", "unknown")
    except (OSError, ValueError) as e:
        logger.warning("version_data_unavailable", error=str(e))
        version = "unknown"

    app = FastAPI(
        title="shopsync",
        description="Shopify webhook ingestion and dashboard refresh service",
        version=version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # ────────────────────────────────────────────────────────────
    # Middleware
    # ────────────────────────────────────────────────────────────

    # Rate limiting (slowapi): limiter state must live on the app instance
    # for the decorated refresh routes.
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # ────────────────────────────────────────────────────────────
    # Routes
    # ────────────────────────────────────────────────────────────

    app.include_router(api_router)

    @app.get("/", tags=["root"])
    async def root():
        """
        PURPOSE: Root endpoint for API availability check.

        CALLED BY: Load balancers, basic connectivity tests

        Returns:
            dict: Service information and version
        """
        return {
            "status": "ok",
            "service": "shopsync",
            "version": version,
        }

    # ────────────────────────────────────────────────────────────
    # Exception Handlers
    # ────────────────────────────────────────────────────────────

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    logger.info(
        "fastapi_application_created",
        version=version,
        api_prefix="/api"
    )

    return app


# Create the application
app = create_app()


if __name__ == "__main__":
    """
    PURPOSE: Run FastAPI application with Uvicorn server.

    Usage:
        python -m shopsync.main
        OR
        uvicorn shopsync.main:app --host 0.0.0.0 --port 8000 --reload
    """
    import uvicorn

    uvicorn.run(
        "shopsync.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.LOG_LEVEL.lower(),
    )
