"""Middleware for observability: request/response logging."""

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from harmonydb.infrastructure.observability.logging import (
    get_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging HTTP requests and responses."""

    def __init__(self, app: ASGIApp, log_request_body: bool = False) -> None:
        """Initialize middleware.

        Args:
            app: ASGI application
            log_request_body: Whether to log request body (can be verbose)
        """
        super().__init__(app)
        self.log_request_body = log_request_body

    # Yo, flow is: take X-Correlation-ID from the request (or mint one), run the handler, log ONE
    # completion line, echo the ID back in the response header. Failures are logged with context
    # and re-raised so the exception handlers still decide the response.
    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Process request and log details.

        Args:
            request: Incoming request
            call_next: Next middleware/handler in chain

        Returns:
            Response from application
        """
        set_correlation_id(request.headers.get("X-Correlation-ID"))

        method = request.method
        path = request.url.path
        is_static = path.startswith("/static/")

        if self.log_request_body and method in ("POST", "PUT", "PATCH"):
            body = await request.body()
            logger.debug(
                f"Request body for {method} {path}",
                extra={"body": body.decode("utf-8", errors="replace")[:2000]},
            )

        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.exception(
                f"✗ {method} {path} FAILED ({duration_ms:.0f}ms)",
                extra={
                    "method": method,
                    "path": path,
                    "duration_ms": int(duration_ms),
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            raise

        duration_ms = (time.time() - start_time) * 1000
        if not is_static:
            status_mark = "✓" if response.status_code < 400 else "✗"
            logger.info(
                f"{status_mark} {method} {path} → {response.status_code} ({duration_ms:.0f}ms)",
                extra={
                    "method": method,
                    "path": path,
                    "status_code": response.status_code,
                    "duration_ms": int(duration_ms),
                },
            )

        response.headers["X-Correlation-ID"] = get_correlation_id()
        return response
