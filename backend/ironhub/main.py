"""
Main Entry Point - FastAPI Application
Project: Iron Hub (customer ledger backend)

Configures the FastAPI application with middleware, routers, exception
handlers and lifecycle.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ironhub.core.config import settings
from ironhub.core.database import close_db, init_db
from ironhub.core.exceptions import AppException, InconsistentStateError

# ------------------------------------------------------------
# Logging configuration
# ------------------------------------------------------------
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ------------------------------------------------------------
# Lifespan Handler
# ------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifecycle.

    - Startup: checks the database connection (postgres backend)
    - Shutdown: closes the database connections
    """
    # Startup
    logger.info(
        "Starting %s v%s (storage: %s)",
        settings.app_name, settings.app_version, settings.storage_backend,
    )
    await init_db()
    logger.info("Application started")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await close_db()
    logger.info("Application stopped")


# ------------------------------------------------------------
# FastAPI Application
# ------------------------------------------------------------
app = FastAPI(
    title=settings.app_name,
    description="Heavy-equipment logistics portal - customer ledger API",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# ------------------------------------------------------------
# Exception Handlers
# ------------------------------------------------------------
@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Handler for every domain exception.

    Serializes the exception as {"detail", "error_code"} with its own status
    code. InconsistentStateError means a ledger invariant broke: it is
    logged at ERROR and the client receives a generic message.
    """
    if isinstance(exc, InconsistentStateError):
        logger.error(
            "Inconsistent ledger state on %s %s: %s",
            request.method, request.url.path, exc.detail,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": "Internal ledger error", "error_code": exc.error_code},
        )

    content = {"detail": exc.detail, "error_code": exc.error_code}
    if exc.extra:
        content["extra"] = exc.extra
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Generic handler for every uncaught exception.

    Logs the traceback and returns HTTP 500; the exception message is only
    included outside production.
    """
    logger.error(
        "Unhandled exception on %s %s: %s",
        request.method, request.url.path, exc,
        exc_info=True,
    )
    content = {"detail": "Internal server error", "error_code": "INTERNAL_SERVER_ERROR"}
    if not settings.is_production:
        content["message"] = str(exc)
    return JSONResponse(status_code=500, content=content)


# ------------------------------------------------------------
# CORS Middleware
# ------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------
@app.get(
    "/health",
    name="Health Check",
    summary="Application health status",
    tags=["System"],
)
async def health_check() -> dict[str, str]:
    """
    Health check endpoint.

    Returns:
        dict: Application status
    """
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.app_env,
        "storage": settings.storage_backend,
    }


# ------------------------------------------------------------
# Router
# ------------------------------------------------------------
from ironhub.api.v1 import api_v1_router  # noqa: E402

app.include_router(api_v1_router)
