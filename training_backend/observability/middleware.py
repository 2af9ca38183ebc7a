"""
FastAPI middleware for observability.

CorrelationMiddleware binds a correlation ID to every request (taken from
the X-Correlation-ID header or generated) and echoes it on the response.
RequestLoggingMiddleware logs one line per request with the caller,
outcome and latency.

Dependencies: fastapi, starlette, training_backend.observability
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from training_backend.observability.correlation import (
    clear_correlation_id,
    set_correlation_id,
)
from training_backend.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
)

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
CALLER_HEADER = "X-User-Id"


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request once it completes, or its exception if it fails."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        context = {
            "method": request.method,
            "path": request.url.path,
            "caller_id": request.headers.get(CALLER_HEADER),
        }

        try:
            response: Response = await call_next(request)
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{request.method} {request.url.path} failed",
                e,
                duration_ms=_elapsed_ms(started),
                **context,
            )
            raise

        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        log_with_context(
            logger,
            level,
            f"{request.method} {request.url.path} -> {response.status_code}",
            status_code=response.status_code,
            duration_ms=_elapsed_ms(started),
            **context,
        )
        return response


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Binds a correlation ID to the request context and echoes it back."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = set_correlation_id(request.headers.get(CORRELATION_HEADER))
        try:
            response: Response = await call_next(request)
        finally:
            clear_correlation_id()
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
