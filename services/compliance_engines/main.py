"""
Compliance Engines Service - Main Application
=============================================

FastAPI application exposing the space compliance rule and scoring engines.

Version: 0.1.0
"""

import uuid
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shared.config import settings
from shared.logging import bind_context, clear_context, get_logger, setup_logging
from shared.models.common import ErrorResponse, HealthResponse
from shared.models.errors import CatalogError, NotFoundError, ProfileValidationError

from services.compliance_engines.catalogs import catalog_counts, warm_catalogs
from services.compliance_engines.routes import (
    copuos,
    cross_regulation,
    eu_space_act,
    export_control,
    incidents,
    nis2,
    scores,
    spectrum,
)

# Setup logging
setup_logging(
    log_level=settings.log_level.value,
    json_logs=settings.is_production,
    service_name="compliance-engines",
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> Any:
    """Application lifespan manager."""
    logger.info(
        "compliance_engines_starting",
        environment=settings.environment.value,
        port=settings.ports.compliance_engines,
    )

    # Startup
    try:
        warm_catalogs()

    except CatalogError as e:
        logger.error("startup_failed", error=str(e))
        raise

    yield

    # Shutdown
    logger.info("compliance_engines_shutting_down")


# Create FastAPI application
app = FastAPI(
    title="Compliance Engines Service",
    description="Space regulatory compliance rule and scoring engines",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins_list,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(request: Request, call_next: Any) -> Any:
    """Tag every log line of a request with its id and path."""
    clear_context()
    bind_context(
        request_id=request.headers.get("x-request-id") or str(uuid.uuid4()),
        path=request.url.path,
    )
    return await call_next(request)


# ============================================================================
# Health Check Endpoints
# ============================================================================


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """
    Service health check.

    Reports the record count of every requirement catalog.
    """
    try:
        components = {"catalogs": {"status": "healthy", **catalog_counts()}}
    except CatalogError as e:
        components = {"catalogs": {"status": "unhealthy", "error": str(e)}}

    all_healthy = all(c.get("status") == "healthy" for c in components.values())

    return HealthResponse(
        status="healthy" if all_healthy else "degraded",
        service="compliance-engines",
        version="0.1.0",
        components=components,
    )


@app.get("/", tags=["Health"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": "Compliance Engines Service",
        "version": "0.1.0",
        "docs": "/docs",
    }


# ============================================================================
# Include Routers
# ============================================================================

app.include_router(
    eu_space_act.router,
    prefix="/api/v1/eu-space-act",
    tags=["EU Space Act"],
)

app.include_router(
    nis2.router,
    prefix="/api/v1/nis2",
    tags=["NIS2"],
)

app.include_router(
    cross_regulation.router,
    prefix="/api/v1/cross-regulation",
    tags=["Cross-Regulation"],
)

app.include_router(
    copuos.router,
    prefix="/api/v1/copuos",
    tags=["COPUOS / IADC"],
)

app.include_router(
    spectrum.router,
    prefix="/api/v1/spectrum",
    tags=["Spectrum"],
)

app.include_router(
    export_control.router,
    prefix="/api/v1/export-control",
    tags=["Export Control"],
)

app.include_router(
    incidents.router,
    prefix="/api/v1/incidents",
    tags=["Incidents"],
)

app.include_router(
    scores.router,
    prefix="/api/v1/scores",
    tags=["Compliance Scores"],
)


# ============================================================================
# Error Handlers
# ============================================================================


def _error(status_code: int, detail: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=str(detail), status_code=status_code).model_dump(),
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Any, exc: HTTPException) -> Any:
    """Handle HTTP exceptions."""
    logger.warning(
        "http_exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
    )
    return _error(exc.status_code, exc.detail)


@app.exception_handler(ProfileValidationError)
async def profile_validation_handler(request: Any, exc: ProfileValidationError) -> Any:
    """Incomplete questionnaire or profile input."""
    logger.warning("profile_invalid", error=str(exc), path=request.url.path)
    return _error(status.HTTP_400_BAD_REQUEST, str(exc))


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Any, exc: NotFoundError) -> Any:
    logger.warning("not_found", error=str(exc), path=request.url.path)
    return _error(status.HTTP_404_NOT_FOUND, str(exc))


@app.exception_handler(Exception)
async def general_exception_handler(request: Any, exc: Exception) -> Any:
    """Handle unexpected exceptions."""
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# ============================================================================
# Run with Uvicorn
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "services.compliance_engines.main:app",
        host="0.0.0.0",
        port=settings.ports.compliance_engines,
        reload=settings.debug,
        log_level=settings.log_level.value.lower(),
    )
