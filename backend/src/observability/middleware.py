"""FastAPI middleware for observability.

Assigns a request ID to every HTTP request, echoes it back in the
X-Request-ID header, and records request latency.
"""

import time
from typing import Callable

from fastapi import Request, Response
from prometheus_client import Histogram
from starlette.middleware.base import BaseHTTPMiddleware

from .request_id import REQUEST_ID_HEADER, generate_request_id, set_request_id
from .logging_config import get_logger

logger = get_logger(__name__)

http_request_duration_seconds = Histogram(
    "onboarding_http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "status_code"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0]
)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware to generate and inject request IDs."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
        set_request_id(request_id)

        start_time = time.time()
        logger.info(f"{request.method} {request.url.path}")

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"Request failed after {duration_ms:.2f}ms: {type(e).__name__}: {e}",
                exc_info=True
            )
            raise

        duration = time.time() - start_time
        http_request_duration_seconds.labels(
            method=request.method,
            status_code=str(response.status_code),
        ).observe(duration)
        logger.info(
            f"Request completed: {response.status_code} in {duration * 1000:.2f}ms"
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
