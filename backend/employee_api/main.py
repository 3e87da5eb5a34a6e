"""
Employee Manager API — FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app(settings) returns a configured FastAPI
       instance. Nothing is built at import time.
Who:   Called by the process entry point (python -m employee_api) or by
       uvicorn in factory mode (uvicorn employee_api.main:create_app --factory).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐                   │
    │  │ Req ID   │→│  Logging        │                   │
    │  └──────────┘ └─────────────────┘                   │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────────┐ ┌─────────────────┐       │
    │  │ /api/v1/employees... │ │ GET /health     │       │
    │  └──────────────────────┘ └─────────────────┘       │
    │                                                     │
    │  Exception Handlers (plain-text bodies):            │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ Database→500 │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Ping the database and create the employees table if absent
       (failure aborts startup)

    Shutdown (after uvicorn has drained in-flight requests):
    1. Dispose database engine (close all connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse

from employee_api import __version__
from employee_api.config import Settings
from employee_api.database import Database
from employee_api.exceptions import (
    DatabaseError,
    EmployeeManagerError,
    NotFoundError,
    ValidationError,
)
from employee_api.middleware.logging import RequestLoggingMiddleware
from employee_api.middleware.request_id import RequestIDMiddleware, request_id_var
from employee_api.routes import employees, health

logger = logging.getLogger(__name__)

INVALID_PAYLOAD_MESSAGE = "Invalid request payload"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Written to stdout, which container runtimes capture.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # RequestLoggingMiddleware covers access logging
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    # SQL echo is controlled by the engine's echo flag instead
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, database ping, schema bootstrap.
    Shutdown: dispose the engine.

    A database failure during startup is re-raised; uvicorn reports
    "Application startup failed" and exits non-zero.
    """
    settings: Settings = app.state.settings
    database: Database = app.state.database

    setup_logging(settings.log_level)
    logger.info("Employee Manager API %s starting up...", __version__)

    try:
        await database.connect()
    except Exception as e:
        logger.critical("Database unavailable, aborting startup: %s", str(e))
        await database.dispose()
        raise

    logger.info("Server ready at http://%s:%d", settings.host, settings.port)

    yield

    logger.info("Employee Manager API shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes.

    Handler hierarchy:
        ValidationError            → 400 (message)
        RequestValidationError     → 400 "Invalid request payload"
        NotFoundError              → 404 "Employee not found"
        DatabaseError              → 500 (message; cause logged)
        EmployeeManagerError       → 500 (catch-all for custom)
        Exception                  → 500 "Internal server error"

    Bodies are plain text. Driver error text, SQL and stack traces are
    only logged.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.info("[%s] Validation error: %s", rid, exc.message)
        return PlainTextResponse(exc.message, status_code=400)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        # Error details echo the input, which may hold personal data
        logger.info("[%s] Undecodable request (%d errors)", rid, len(exc.errors()))
        return PlainTextResponse(INVALID_PAYLOAD_MESSAGE, status_code=400)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return PlainTextResponse(exc.message, status_code=404)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error(
            "[%s] Database error: %s | Context: %s | Cause: %r",
            rid,
            exc.message,
            exc.context,
            exc.__cause__,
        )
        return PlainTextResponse(exc.message, status_code=500)

    @app.exception_handler(EmployeeManagerError)
    async def handle_app_error(request: Request, exc: EmployeeManagerError):
        rid = request_id_var.get("")
        logger.error("[%s] Unhandled application error: %s", rid, exc.message)
        return PlainTextResponse(exc.message, status_code=500)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=exc)
        return PlainTextResponse("Internal server error", status_code=500)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Immutable configuration. When omitted (uvicorn --factory),
                  it is loaded from the environment.

    Returns:
        Fully configured FastAPI instance. The database engine is created
        here but not connected until the lifespan starts.
    """
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="Employee Manager API",
        description="CRUD service for employee records (name, position, salary).",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = Database(settings)

    # Middleware executes in REVERSE order of addition:
    # RequestID runs first so the logging middleware sees the ID
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(employees.router)
    app.include_router(health.router)

    return app
