"""Main FastAPI application for the Location Resolution API"""

import uuid
from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response as StarletteResponse

from geo_resolver.auth import verify_api_key
from geo_resolver.config import settings
from geo_resolver.errors import InvalidInputError
from geo_resolver.middleware import LoggingMiddleware, MetricsMiddleware, SecurityHeadersMiddleware
from geo_resolver.routers import distance, geocoding, health, quota
from geo_resolver.services.location import LocationService
from geo_resolver.services.quota import QuotaTracker

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer() if settings.log_format == "json" else structlog.dev.ConsoleRenderer(),
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

# Rate limiting
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.rate_limit_per_minute}/minute"]
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting Location Resolution API", version=settings.app_version)

    client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)
    app.state.http_client = client
    app.state.location_service = LocationService.from_settings(settings, client, quota=QuotaTracker())

    logger.info("Location Resolution API started successfully")

    yield

    logger.info("Shutting down Location Resolution API")
    await client.aclose()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Address geocoding and travel distance with provider fallback",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
    lifespan=lifespan
)

# Add rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Add middleware
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(MetricsMiddleware)
app.add_middleware(LoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)

# Include routers
app.include_router(geocoding.router, prefix="/geocoding", tags=["geocoding"])
app.include_router(distance.router, prefix="/distance", tags=["distance"])
app.include_router(quota.router, prefix="/quota", tags=["quota"])
app.include_router(health.router, prefix="", tags=["health"])


@app.get("/metrics")
async def metrics(api_key: str = Depends(verify_api_key)):
    """Prometheus metrics endpoint"""
    return StarletteResponse(
        generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def _run_id(request: Request) -> str:
    return getattr(request.state, 'run_id', str(uuid.uuid4()))


def _error_body(message: str, code: str, run_id: str) -> dict:
    return {"success": False, "error": message, "code": code, "trace_id": run_id}


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    """Bad address or coordinates: no provider was called"""
    run_id = _run_id(request)
    logger.info("Invalid input", run_id=run_id, error=exc.message, path=request.url.path)
    return JSONResponse(status_code=400, content=_error_body(exc.message, "INVALID_INPUT", run_id))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request body or query string"""
    run_id = _run_id(request)
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query"))
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    logger.info("Request validation failed", run_id=run_id, error=message, path=request.url.path)
    return JSONResponse(status_code=400, content=_error_body(message, "INVALID_INPUT", run_id))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Global HTTP exception handler"""
    run_id = _run_id(request)

    logger.error(
        "HTTP exception",
        run_id=run_id,
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
        method=request.method
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.detail, f"HTTP_{exc.status_code}", run_id)
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Global exception handler"""
    run_id = _run_id(request)

    logger.error(
        "Unhandled exception",
        run_id=run_id,
        exception=str(exc),
        path=request.url.path,
        method=request.method,
        exc_info=True
    )

    return JSONResponse(
        status_code=500,
        content=_error_body("Internal server error", "INTERNAL_ERROR", run_id)
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "geo_resolver.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
