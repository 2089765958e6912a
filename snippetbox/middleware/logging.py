"""
Snippetbox — Request Logging Middleware
=========================================

What:  One access-log line for every HTTP request.
How:   Measures the time spent downstream and logs remote address, protocol,
       method, URI, status and duration, tagged with the request ID.
       Health probes (/ping, /health) are not logged.

Log level follows the status code: 5xx → ERROR, 4xx → WARNING, else INFO.
Request bodies are never logged (they contain passwords).
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from snippetbox.middleware.request_id import request_id_var

logger = logging.getLogger("snippetbox.access")

QUIET_PATHS = {"/ping", "/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        proto = f"HTTP/{request.scope.get('http_version', '1.1')}"
        uri = path
        if request.url.query:
            uri = f"{path}?{request.url.query}"

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        rid = request_id_var.get("")
        logger.log(
            log_level,
            "%s %s %s %s %d %.1fms [%s]",
            client_ip,
            proto,
            request.method,
            uri,
            status,
            duration_ms,
            rid,
            extra={
                "request_id": rid,
                "ip": client_ip,
                "proto": proto,
                "method": request.method,
                "uri": uri,
                "status": status,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response
