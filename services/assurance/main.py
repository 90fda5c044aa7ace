"""
Assurance Service - Main Application
====================================

FastAPI application for delivery projects, service standard assessments
and their change history.

Version: 0.1.0
"""

from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.config import settings
from shared.database.mongodb import MongoDBClient
from shared.logging import bind_context, clear_context, get_logger, setup_logging
from shared.models.common import ErrorResponse, HealthResponse
from services.assurance.errors import AssuranceError, InternalError, ValidationError
from services.assurance.routes import (
    assessments,
    delivery_groups,
    delivery_partners,
    insights,
    professions,
    project_delivery_partners,
    projects,
    service_standards,
    themes,
)
from services.assurance.validators import format_errors

# Setup logging
setup_logging(
    log_level=settings.log_level.value,
    json_logs=settings.is_production,
    service_name=settings.service_name,
)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> Any:
    """Application lifespan manager."""
    logger.info(
        "assurance_starting",
        environment=settings.environment.value,
        port=settings.ports.assurance,
    )

    try:
        MongoDBClient.get_client()
        await MongoDBClient.create_indexes()
        logger.info("mongodb_connected")
    except Exception as e:
        logger.error("startup_failed", error=str(e))
        raise

    yield

    logger.info("assurance_shutting_down")
    await MongoDBClient.close()


app = FastAPI(
    title="Assurance API",
    description="Delivery projects, service standard assessments and change history",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins_list,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Bind method and path to every log line emitted while handling the request."""
    clear_context()
    bind_context(method=request.method, path=request.url.path)
    try:
        return await call_next(request)
    finally:
        clear_context()


# ============================================================================
# Health Check Endpoints
# ============================================================================


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """
    Service health check.

    Returns health status of the service and MongoDB.
    """
    components: dict[str, dict[str, Any]] = {"mongodb": await MongoDBClient.health_check()}

    all_healthy = all(c.get("status") == "healthy" for c in components.values())

    return HealthResponse(
        status="healthy" if all_healthy else "degraded",
        service=settings.service_name,
        version="0.1.0",
        components=components,
    )


@app.get("/", tags=["Health"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": "Assurance API",
        "version": "0.1.0",
        "docs": "/docs",
    }


# ============================================================================
# Include Routers
# ============================================================================

app.include_router(projects.router, prefix="/api/v1/projects", tags=["Projects"])
app.include_router(assessments.router, prefix="/api/v1/projects", tags=["Assessments"])
app.include_router(
    project_delivery_partners.router, prefix="/api/v1/projects", tags=["Project Delivery Partners"]
)
app.include_router(service_standards.router, prefix="/api/v1/service-standards", tags=["Service Standards"])
app.include_router(professions.router, prefix="/api/v1/professions", tags=["Professions"])
app.include_router(delivery_groups.router, prefix="/api/v1/delivery-groups", tags=["Delivery Groups"])
app.include_router(delivery_partners.router, prefix="/api/v1/delivery-partners", tags=["Delivery Partners"])
app.include_router(themes.router, prefix="/api/v1/themes", tags=["Themes"])
app.include_router(insights.router, prefix="/api/v1/insights", tags=["Insights"])


# ============================================================================
# Error Handlers
# ============================================================================


def _error_response(status_code: int, error: str, errors: list[str] | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, status_code=status_code, errors=errors)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json", exclude_none=True))


@app.exception_handler(AssuranceError)
async def assurance_exception_handler(request: Request, exc: AssuranceError) -> JSONResponse:
    """Render domain errors with their own status code."""
    errors = exc.errors if isinstance(exc, ValidationError) else None
    log = logger.error if isinstance(exc, InternalError) else logger.warning
    log(
        "request_failed",
        status_code=exc.status_code,
        error=exc.message,
        errors=errors,
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    return _error_response(exc.status_code, exc.message, errors)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies and query strings are reported as 400 like any other validation failure."""
    errors = format_errors(exc.errors())
    logger.warning("request_validation_failed", errors=errors, path=request.url.path)
    return _error_response(status.HTTP_400_BAD_REQUEST, "Request validation failed", errors)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions."""
    logger.warning(
        "http_exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
    )
    response = _error_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
    )
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# ============================================================================
# Run with Uvicorn
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "services.assurance.main:app",
        host="0.0.0.0",
        port=settings.ports.assurance,
        reload=settings.debug,
        log_level=settings.log_level.value.lower(),
    )
