"""
LifeStream Backend: FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires middleware, exception handlers, routers and the
       lifespan that owns the document store client.
Who:   uvicorn (`uvicorn lifestream.main:app` or `python -m lifestream`).

    Middleware:   Request ID → Logging → CORS
    Routes:       /jwt  /users…  /donations…  /blogs…  /  /health
    Errors:       Unauthorized→401  Forbidden→403
                  Database→500  anything else→500

Lifecycle:
    Startup:  logging, settings validation, Mongo client on app.state.database
    Shutdown: close the Mongo client
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lifestream import __version__
from lifestream.config import settings
from lifestream.database import create_database
from lifestream.exceptions import (
    DatabaseError,
    ForbiddenError,
    LifeStreamError,
    UnauthorizedError,
)
from lifestream.middleware.logging import RequestLoggingMiddleware
from lifestream.middleware.request_id import RequestIDMiddleware, current_request_id
from lifestream.routes import auth, blogs, donations, health, users

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] lifestream.access: GET /blogs 200 3.1ms [a1b2c3d4] from 10.0.0.2
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # The access middleware already logs every request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Acquire the document store client on startup and release it on shutdown.

    A missing signing secret is logged rather than fatal so /health still
    answers; token routes will reject every token until it is configured.
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("LifeStream Backend starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    database = create_database(settings)
    app.state.database = database
    try:
        await database.ping()
        logger.info("Connected to MongoDB database '%s'", settings.database_name)
    except Exception as e:
        logger.error("MongoDB not reachable at startup: %s", str(e))

    logger.info("Life Stream is running on port %d", settings.port)
    logger.info("=" * 60)

    yield

    logger.info("LifeStream Backend shutting down...")
    await database.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(status_code: int, error: str, message: str, details=None) -> JSONResponse:
    content = {"error": error, "message": message, "request_id": current_request_id()}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the exception hierarchy to HTTP responses.

        UnauthorizedError → 401
        ForbiddenError    → 403
        DatabaseError     → 500 (generic message, context logged)
        LifeStreamError   → 500
        Exception         → 500 (stack trace logged, never returned)
    """

    @app.exception_handler(UnauthorizedError)
    async def handle_unauthorized(request: Request, exc: UnauthorizedError):
        return _error_response(401, "unauthorized", exc.message)

    @app.exception_handler(ForbiddenError)
    async def handle_forbidden(request: Request, exc: ForbiddenError):
        return _error_response(403, "forbidden", exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            current_request_id(),
            exc.message,
            exc.context,
        )
        return _error_response(500, "server_error", exc.message)

    @app.exception_handler(LifeStreamError)
    async def handle_app_error(request: Request, exc: LifeStreamError):
        logger.error("[%s] %s: %s", current_request_id(), type(exc).__name__, exc.message)
        return _error_response(500, "server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            current_request_id(),
            str(exc),
            exc_info=True,
        )
        return _error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="LifeStream API",
        description=(
            "Blood-donation coordination backend: donors, donation requests and blog "
            "posts, with token authentication and donor/volunteer/admin roles."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    # Last added runs first: RequestID → Logging → CORS → routes
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.cors_origins_list != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(donations.router)
    app.include_router(blogs.router)
    app.include_router(health.router)

    return app


app = create_app()
