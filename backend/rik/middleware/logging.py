"""
RIK — Request Logging Middleware
=================================

What:  One access log line per request: method, path, status, duration.
Why:   uvicorn's access log has no request ID and no per-status log levels.
How:   Times the downstream call and logs on the `rik.access` logger with the
       fields also attached as `extra` for structured handlers.

Level by status:
    5xx → ERROR, 4xx → WARNING, everything else → INFO

Health-check routes (`/health`, `.../healthcheck`) are not logged: probes
hit them every few seconds.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from rik.middleware.request_id import request_id_var

logger = logging.getLogger("rik.access")


def is_health_check_path(path: str) -> bool:
    return path == "/health" or path.rstrip("/").endswith("/healthcheck")


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if is_health_check_path(path):
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
