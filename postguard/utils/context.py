"""
Request Context Utilities.

Provides correlation IDs and request context for:
- Audit event correlation
- Log correlation
- Debugging in production

Usage:
    # In middleware (automatic)
    app.add_middleware(RequestContextMiddleware)

    # Access anywhere in request lifecycle
    from postguard.utils.context import get_correlation_id

    correlation_id = get_correlation_id()
"""

from __future__ import annotations

import logging
import sys
import uuid
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any, Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
import structlog


# ============================================================
# CONTEXT VARIABLES
# ============================================================

# Request-scoped context using contextvars (async-safe)
_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
_request_context: ContextVar[Optional["RequestContext"]] = ContextVar("request_context", default=None)


# ============================================================
# REQUEST CONTEXT
# ============================================================

@dataclass
class RequestContext:
    """
    Context for the current request.

    Contains all request-scoped metadata useful for logging
    and auditing.
    """
    # IDs
    request_id: str  # Unique per request
    correlation_id: str  # Shared across service calls

    # Request info
    method: str = ""
    path: str = ""

    # Auth info (populated once the identity is verified)
    user_id: Optional[str] = None
    role: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for logging."""
        return {
            "request_id": self.request_id,
            "correlation_id": self.correlation_id,
            "method": self.method,
            "path": self.path,
            "user_id": self.user_id,
            "role": self.role,
        }


# ============================================================
# CONTEXT ACCESSORS
# ============================================================

def get_correlation_id() -> Optional[str]:
    """
    Get the current correlation ID.

    Returns None if called outside of a request context.
    """
    return _correlation_id.get()


def get_request_id() -> Optional[str]:
    """Get the current request ID."""
    return _request_id.get()


def get_request_context() -> Optional[RequestContext]:
    """Get the full request context."""
    return _request_context.get()


def set_context_user(user_id: str, role: Optional[str] = None) -> None:
    """
    Set user info in request context.

    Called by the identity dependency after verification.
    """
    ctx = _request_context.get()
    if ctx:
        ctx.user_id = user_id
        ctx.role = role


# ============================================================
# MIDDLEWARE
# ============================================================

class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Middleware that creates request context for each request.

    Sets up:
    - request_id: Unique ID for this request
    - correlation_id: From X-Correlation-ID / X-Request-ID header or generated
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())
        correlation_id = (
            request.headers.get("X-Correlation-ID") or
            request.headers.get("X-Request-ID") or
            str(uuid.uuid4())
        )

        ctx = RequestContext(
            request_id=request_id,
            correlation_id=correlation_id,
            method=request.method,
            path=request.url.path,
        )

        tokens = (
            _correlation_id.set(correlation_id),
            _request_id.set(request_id),
            _request_context.set(ctx),
        )

        try:
            response = await call_next(request)
        finally:
            _request_context.reset(tokens[2])
            _request_id.reset(tokens[1])
            _correlation_id.reset(tokens[0])

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Correlation-ID"] = correlation_id

        return response


# ============================================================
# STRUCTLOG
# ============================================================

def add_request_context(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Structlog processor that adds request context to all logs."""
    correlation_id = get_correlation_id()
    request_id = get_request_id()

    if correlation_id:
        event_dict.setdefault("correlation_id", correlation_id)
    if request_id:
        event_dict.setdefault("request_id", request_id)

    ctx = get_request_context()
    if ctx and ctx.user_id:
        event_dict.setdefault("user_id", ctx.user_id)

    return event_dict


def configure_logging(level: str = "INFO", fmt: str = "json") -> None:
    """
    Configure stdlib logging and structlog.

    Args:
        level: Log level name
        fmt: "json" for machine-readable output, "text" for the console
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)

    renderer = (
        structlog.processors.JSONRenderer()
        if fmt == "json"
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_request_context,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )
