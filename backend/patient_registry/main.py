"""Patient Registry - Patient intake and records API

Main FastAPI application entry point.
"""

import time
import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import Counter, Histogram, make_asgi_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from patient_registry.api.v1.router import api_router
from patient_registry.core.config import settings
from patient_registry.core.exceptions import RegistryError
from patient_registry.core.logging import (
    bind_request_context,
    clear_request_context,
    get_logger,
    setup_logging,
)
from patient_registry.models.base import (
    create_engine_from_settings,
    create_session_maker,
    init_models,
)

# Initialize logging
setup_logging(
    log_level="DEBUG" if settings.debug else settings.logging.level,
    json_logs=settings.json_logs,
    log_file=settings.logging.file,
)

logger = get_logger(__name__)

# Prometheus metrics
REQUEST_COUNT = Counter(
    "patient_registry_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "patient_registry_request_latency_seconds",
    "HTTP request latency",
    ["method", "endpoint"],
)


def _safe_request_path(request: Request) -> str:
    """Return a route template path to avoid logging PHI in URLs."""
    route = request.scope.get("route")
    template = getattr(route, "path_format", None)
    if template is None:
        template = getattr(route, "path", None)
    if template is None:
        return request.url.path

    # Routes of an included router may report a path relative to its prefix;
    # the prefix is whatever precedes the matched part of the concrete path
    try:
        concrete = template.format(**request.scope.get("path_params", {}))
    except (KeyError, IndexError, ValueError):
        return template or "/"
    path = request.url.path
    if path.endswith(concrete):
        template = path[: len(path) - len(concrete)] + template
    return template or "/"


def _format_validation_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Flatten pydantic errors into field/message pairs without echoing input."""
    errors = []
    for error in exc.errors():
        # Drop the "body"/"path" prefix so clients see payload field names
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in ("body", "path", "query"):
            loc = loc[1:]
        errors.append(
            {
                "field": ".".join(loc) or None,
                "message": error.get("msg", "Invalid value"),
                "type": error.get("type"),
            }
        )
    return errors


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup and shutdown events."""
    # Startup
    logger.info(
        "Starting Patient Registry",
        version=settings.app_version,
        environment=settings.environment,
    )

    engine = create_engine_from_settings(settings.database)
    session_maker = create_session_maker(engine)
    app.state.db_engine = engine
    app.state.db_session_maker = session_maker
    logger.info("Database connection pool initialized")

    if settings.database.create_all:
        await init_models(engine)
        logger.info("Database schema ensured")

    # Optional demo data seeding (development only)
    if settings.enable_demo_data:
        try:
            from patient_registry.services.demo_data import seed_demo_patients

            async with session_maker() as session:
                inserted = await seed_demo_patients(session)
                logger.warning("Demo data enabled", patients_seeded=inserted)
        except (RegistryError, SQLAlchemyError) as e:
            logger.warning(f"Could not seed demo data: {e}")

    logger.info("Patient Registry started successfully")

    yield

    # Shutdown
    logger.info("Shutting down Patient Registry")

    if hasattr(app.state, "db_engine"):
        await app.state.db_engine.dispose()
        logger.info("Database connections closed")

    logger.info("Patient Registry shutdown complete")


def create_application() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="""
        Patient Registry stores patient records and their postal addresses.

        ## Features

        - **Intake**: register a patient with a primary and optional secondary address
        - **Records**: fetch a patient by id or list all patients in creation order
        - **Partial updates**: change only the fields sent in the request

        ## API Documentation

        - **Interactive docs**: `/docs` (Swagger UI)
        - **ReDoc**: `/redoc`
        - **OpenAPI spec**: `/openapi.json`
        """,
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Process-Time"],
    )

    # Add GZip compression
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all incoming requests with timing."""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        bind_request_context(request_id, method=request.method)
        start_time = time.time()

        try:
            response = await call_next(request)
            process_time = time.time() - start_time
            safe_path = _safe_request_path(request)

            REQUEST_COUNT.labels(
                method=request.method,
                endpoint=safe_path,
                status=response.status_code,
            ).inc()
            REQUEST_LATENCY.labels(
                method=request.method,
                endpoint=safe_path,
            ).observe(process_time)

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Process-Time"] = f"{process_time:.4f}"

            logger.info(
                "request_completed",
                path=safe_path,
                status_code=response.status_code,
                process_time=f"{process_time:.4f}s",
            )
            return response
        finally:
            clear_request_context()

    # Mount Prometheus metrics endpoint
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    # Include API router
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint for load balancers and monitoring."""
        return {
            "status": "healthy",
            "version": settings.app_version,
            "environment": settings.environment,
        }

    @app.get("/ready", tags=["Health"])
    async def readiness_check(request: Request):
        """Readiness check for container orchestration."""
        checks = {"database": False}

        if hasattr(request.app.state, "db_session_maker"):
            try:
                async with request.app.state.db_session_maker() as session:
                    await session.execute(text("SELECT 1"))
                    checks["database"] = True
            except (SQLAlchemyError, OSError):
                checks["database"] = False

        all_ready = all(checks.values())
        return JSONResponse(
            status_code=200 if all_ready else 503,
            content={
                "ready": all_ready,
                "checks": checks,
            },
        )

    @app.exception_handler(RegistryError)
    async def registry_exception_handler(request: Request, exc: RegistryError):
        """Map domain errors to their status codes."""
        log_method = logger.error if exc.status_code >= 500 else logger.info
        log_method(
            "request_failed",
            path=_safe_request_path(request),
            method=request.method,
            error_type=type(exc).__name__,
            status_code=exc.status_code,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Report every violated constraint as a client error."""
        errors = _format_validation_errors(exc)
        logger.info(
            "request_validation_failed",
            path=_safe_request_path(request),
            method=request.method,
            error_count=len(errors),
        )
        return JSONResponse(
            status_code=400,
            content={"detail": "Validation failed", "errors": errors},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.error(
            "unhandled_exception",
            path=_safe_request_path(request),
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "message": str(exc) if settings.debug else "An unexpected error occurred",
            },
        )

    return app


# Create application instance
app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "patient_registry.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=1 if settings.debug else settings.workers,
        log_level="debug" if settings.debug else "info",
    )
