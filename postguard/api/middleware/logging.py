"""
Logging middleware for request/response logging.
"""

import time
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from postguard.utils.context import get_request_context

logger = logging.getLogger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Log request/response details.

    Runs inside RequestContextMiddleware, so the request context (including
    the caller once the identity is verified) is attached to every line.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.perf_counter()

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        ctx = get_request_context()

        logger.info(
            "%s %s -> %s (%.2f ms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            extra={
                **(ctx.to_dict() if ctx else {}),
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )

        return response
