"""
# Logging Utilities

Structured logging helpers shared by the application entry point and routes.

- `log_application_lifecycle`: startup/shutdown milestones with details.
- `log_error_with_context`: an exception plus the operation it interrupted.
- `RequestLoggingMiddleware`: one line per HTTP request with timing.
"""

import time
from typing import Any, Callable, Dict, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from admin_backend.managers.logging_manager import get_logger

lifecycle_logger = get_logger(prefix="[LIFECYCLE]")
error_logger = get_logger(prefix="[ERROR]")
request_logger = get_logger(prefix="[REQUEST]")


def log_application_lifecycle(event: str, details: Optional[Dict[str, Any]] = None) -> None:
    """
    Log an application lifecycle event.

    Args:
        event: Event name, e.g. `"startup_initiated"` or `"database_connected"`.
        details: Extra key/value pairs attached to the record.
    """
    details = details or {}
    lifecycle_logger.info("Lifecycle event: %s %s", event, details, extra={"lifecycle_event": event})


def log_error_with_context(error: BaseException, context: Optional[Dict[str, Any]] = None) -> None:
    """
    Log an exception together with the context of the failing operation.

    Args:
        error: The exception being reported.
        context: Operation details, e.g. `{"operation": "add_blog"}`.
    """
    context = context or {}
    error_logger.error(
        "%s: %s | context=%s",
        type(error).__name__,
        error,
        context,
        exc_info=(type(error), error, error.__traceback__),
        extra={"error_context": context},
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware logging method, path, status code and duration of every request.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        client_ip = request.client.host if request.client else "unknown"
        try:
            response = await call_next(request)
        except Exception:
            duration = time.time() - start_time
            request_logger.error(
                "%s %s failed after %.3fs (client: %s)", request.method, request.url.path, duration, client_ip
            )
            raise

        duration = time.time() - start_time
        request_logger.info(
            "%s %s -> %d in %.3fs (client: %s)",
            request.method,
            request.url.path,
            response.status_code,
            duration,
            client_ip,
        )
        return response
