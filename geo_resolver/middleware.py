"""Custom middleware for the location resolution API"""

import time
import uuid
from typing import Callable
import structlog

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from geo_resolver.metrics import REQUEST_COUNT, REQUEST_DURATION

logger = structlog.get_logger()


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for structured request/response logging"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Generate run ID
        run_id = str(uuid.uuid4())
        request.state.run_id = run_id

        start_time = time.time()
        logger.info(
            "Request started",
            run_id=run_id,
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
        )

        try:
            response = await call_next(request)
            duration_ms = int((time.time() - start_time) * 1000)

            logger.info(
                "Request completed",
                run_id=run_id,
                status_code=response.status_code,
                duration_ms=duration_ms,
            )

            response.headers["X-Run-ID"] = run_id
            return response

        except Exception as exc:
            duration_ms = int((time.time() - start_time) * 1000)

            logger.error(
                "Request failed",
                run_id=run_id,
                exception=str(exc),
                duration_ms=duration_ms,
                exc_info=True
            )

            raise


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to collect Prometheus request metrics"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        response = await call_next(request)
        duration = time.time() - start_time

        REQUEST_DURATION.labels(
            method=request.method,
            endpoint=request.url.path
        ).observe(duration)

        REQUEST_COUNT.labels(
            method=request.method,
            endpoint=request.url.path,
            status_code=response.status_code
        ).inc()

        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware adding security headers to every response"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        return response
