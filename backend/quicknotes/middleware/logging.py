"""
QuickNotes Backend — Request Logging Middleware
=================================================

What:  One access-log line per HTTP request with status and duration.
How:   Measures time around call_next and logs on the `quicknotes.access`
       logger, picking the level from the status class.
When:  After RequestIDMiddleware, so the request ID is available.

Log line:
    POST /notes 201 0.8ms [a1b2c3d4] from 127.0.0.1

The same values are attached as `extra` fields (request_id, method, path,
status, duration_ms, client_ip) for handlers that emit structured output.
Request bodies are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from quicknotes.middleware.request_id import request_id_var

logger = logging.getLogger("quicknotes.access")

# Probed every few seconds by monitors
SKIPPED_PATHS = {"/health"}


def level_for_status(status: int) -> int:
    """5xx → ERROR, 4xx → WARNING, everything else → INFO."""
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status, duration, request ID and client IP."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()

        # request.client is None under some test transports
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        rid = request_id_var.get("")

        try:
            response = await call_next(request)
        except Exception:
            # The 500 body is written later by ServerErrorMiddleware
            _log_access(method, path, 500, start_time, rid, client_ip)
            raise

        _log_access(method, path, response.status_code, start_time, rid, client_ip)
        return response


def _log_access(
    method: str, path: str, status: int, start_time: float, rid: str, client_ip: str
) -> None:
    duration_ms = (time.perf_counter() - start_time) * 1000
    logger.log(
        level_for_status(status),
        "%s %s %d %.1fms [%s] from %s",
        method,
        path,
        status,
        duration_ms,
        rid,
        client_ip,
        extra={
            "request_id": rid,
            "method": method,
            "path": path,
            "status": status,
            "duration_ms": round(duration_ms, 2),
            "client_ip": client_ip,
        },
    )
