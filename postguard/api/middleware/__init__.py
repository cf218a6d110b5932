"""Middleware package."""

from postguard.api.middleware.logging import LoggingMiddleware
from postguard.utils.context import RequestContextMiddleware

__all__ = [
    "LoggingMiddleware",
    "RequestContextMiddleware",
]
