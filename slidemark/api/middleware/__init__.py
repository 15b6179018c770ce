"""API middleware for Slidemark."""

from slidemark.api.middleware.logging import LoggingMiddleware

__all__ = [
    "LoggingMiddleware",
]
