"""
RIK — FastAPI Application Factory
==================================

What:  Boots a RIK instance: reads the RIK home, builds the versioned API and
       returns a configured FastAPI application.
Why:   All discovery and validation happens here, once, before the first
       request. A broken controller must stop the process, not a request.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn (`uvicorn rik.main:create_app --factory`), run(), and tests.

Boot Sequence:
    1. Configure logging
    2. HomeManager.initialize(RIK_HOME) + set_settings(ApiSettings)
    3. Global customization → custom logger (if provided)
    4. Discover resources, pick the builder for api_version.mode
    5. build_health_checks → setup_router_before_api → build_api
       → setup_router_after_api
    6. Mount the API router at API_PREFIX, add middleware, exception
       handlers and GET /health

    Any exception in 2-6 is logged with its traceback and re-raised: there is
    no partial start and no retry.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │  Middleware:  Request ID → Access Logging           │
    │  Routes:      /api/...  (generated)   /health       │
    │  Exception Handlers:                                │
    │    ValidationError→400 │ NotFoundError→404 │ →500   │
    └─────────────────────────────────────────────────────┘
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse

from rik import __version__
from rik.api_builders import get_api_builder
from rik.config import ApiSettings, Settings, settings
from rik.exceptions import NotFoundError, RIKError, ValidationError
from rik.logger import reset_rik_logger, set_custom_logger, setup_logging
from rik.middleware.logging import RequestLoggingMiddleware
from rik.middleware.request_id import RequestIDMiddleware, request_id_var
from rik.routes import health
from rik.services.customization import GET_CUSTOM_LOGGER
from rik.services.home_manager import HomeManager

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    app_settings: Settings = app.state.settings
    logger.info(
        "RIK instance is listening on %s:%d (home: %s, mode: %s)",
        app_settings.host,
        app_settings.port,
        app_settings.rik_home,
        app.state.api_settings.api_version.mode,
    )
    yield
    logger.info("RIK instance shutting down")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions raised by resource controllers to JSON error responses.

    Handler hierarchy:
        ValidationError   → 400 Bad Request
        NotFoundError     → 404 Not Found (also unknown API version in header mode)
        RIKError (base)   → 500, generic message, details logged only
        Exception         → 500, generic message, traceback logged only
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(RIKError)
    async def handle_rik_error(request: Request, exc: RIKError):
        rid = request_id_var.get("")
        logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An internal error occurred. Please try again later.",
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    app_settings: Optional[Settings] = None,
    configure_logging: bool = True,
) -> FastAPI:
    """
    Build a RIK application from the RIK home named in the settings.

    configure_logging=False leaves the root logger alone (tests use caplog).

    Raises:
        Whatever aborted the boot (ResourceValidationError,
        UnsupportedApiVersionModeError, ...), after logging it.
    """
    app_settings = app_settings or settings
    if configure_logging:
        setup_logging(app_settings.log_level)
    reset_rik_logger()
    try:
        return _build_app(app_settings)
    except Exception:
        logger.error("Unhandled error while booting RIK", exc_info=True)
        raise


def _build_app(app_settings: Settings) -> FastAPI:
    manager = HomeManager()
    manager.initialize(app_settings.rik_home)
    manager.set_settings(ApiSettings.from_settings(app_settings))

    customization = manager.get_customization()
    if customization and customization.has(GET_CUSTOM_LOGGER):
        custom_logger = customization.get_custom_logger()
        if isinstance(custom_logger, (logging.Handler, logging.Logger)):
            set_custom_logger(custom_logger, app_settings.log_level)
        else:
            logger.warning(
                "The RIK customization's %s returned %s instead of a logging.Handler "
                "or logging.Logger; keeping the default logger",
                GET_CUSTOM_LOGGER,
                type(custom_logger).__name__,
            )

    api_settings = manager.get_settings()
    catalog = manager.get_available_resources()
    api_builder = get_api_builder(api_settings.api_version.mode)

    # ── Generated API ─────────────────────────────────────────────────────
    api_router = APIRouter()
    api_builder.build_health_checks(api_router, catalog, manager)
    if customization:
        customization.setup_router_before_api(api_router)
    api_builder.build_api(api_router, catalog, manager)
    if customization:
        customization.setup_router_after_api(api_router)

    app = FastAPI(
        title="RIK API",
        description="Versioned REST API built from a RIK home directory.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.api_settings = api_settings
    app.state.home_manager = manager
    app.state.registry = manager.registry

    # Last added = first to execute: Request ID runs before access logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(api_router, prefix=app_settings.api_prefix)
    app.include_router(health.router)

    logger.info(
        "RIK API built: %d version(s), %d resource(s)",
        len(catalog),
        len(manager.registry),
    )
    return app


def run() -> None:
    """Console entry point: serve create_app() with uvicorn."""
    uvicorn.run(
        "rik.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
