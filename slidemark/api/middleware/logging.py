"""Request logging middleware."""

import logging
import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("slidemark.api")


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request with a short request id, status and timing.

    The id is also returned in the ``X-Request-ID`` response header.
    """

    def __init__(self, app, exclude_paths: list[str] | None = None):
        super().__init__(app)
        self.exclude_paths = exclude_paths or ["/health"]

    async def dispatch(self, request: Request, call_next) -> Response:
        """Process request with logging."""
        if any(request.url.path.startswith(p) for p in self.exclude_paths):
            return await call_next(request)

        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        request.state.request_id = request_id

        start_time = time.perf_counter()
        method = request.method
        path = request.url.path

        logger.info(f"[{request_id}] {method} {path} - Client: {self._get_client_ip(request)}")

        try:
            response = await call_next(request)
        except Exception as e:
            duration = (time.perf_counter() - start_time) * 1000
            logger.error(f"[{request_id}] {method} {path} - ERROR - {duration:.2f}ms - {e}")
            raise

        duration = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        log_level = logging.INFO if status < 400 else logging.WARNING if status < 500 else logging.ERROR
        logger.log(log_level, f"[{request_id}] {method} {path} - {status} - {duration:.2f}ms")

        response.headers["X-Request-ID"] = request_id
        return response

    def _get_client_ip(self, request: Request) -> str:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"
