"""classtree API main application module.

This module initializes the FastAPI application and configures
core middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from classtree.api.classes import router as classes_router
from classtree.api.health import router as health_router
from classtree.api.middleware import setup_middleware
from classtree.api.products import router as products_router
from classtree.api.registry import router as registry_router
from classtree.infrastructure.config import settings
from classtree.infrastructure.database import database
from classtree.infrastructure.logging_config import configure_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    # Startup
    configure_logging(settings.log_level, json=settings.log_json)
    logger.info(
        "Starting classtree API",
        version=settings.api_version,
        debug=settings.debug,
    )

    await app.state.database.create_schema()
    logger.info("Database schema ready")

    yield

    # Shutdown
    logger.info("Shutting down classtree API")
    await app.state.database.dispose()


app = FastAPI(
    title="classtree API",
    description="Hierarchical product taxonomy with inherited attributes",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Storage used by every request; tests swap it before startup
app.state.database = database

# CORS middleware (must be added before custom middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Setup custom middleware (request ID, error handling, domain errors)
setup_middleware(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(registry_router)
app.include_router(classes_router)
app.include_router(products_router)


# ============================================================================
# Custom Exception Handlers
# ============================================================================


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    """Handle HTTP exceptions with consistent format."""
    request_id = getattr(request.state, "request_id", None)

    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", "ERROR")
        message = detail.get("message", str(detail))
        details = detail.get("details", {})
    else:
        error_code = "ERROR"
        message = str(detail)
        details = {}

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details,
            "request_id": request_id,
        },
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request, exc):
    """Handle uncaught exceptions with consistent format."""
    request_id = getattr(request.state, "request_id", None)

    logger.exception(
        "Unhandled exception in handler",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )

    return JSONResponse(
        status_code=500,
        content={
            "error_code": "INTERNAL_ERROR",
            "message": "An internal error occurred",
            "details": {},
            "request_id": request_id,
        },
    )
