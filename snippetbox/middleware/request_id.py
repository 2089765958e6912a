"""
Snippetbox — Request ID Middleware
====================================

What:  Gives each request a short correlation ID and echoes it back.
How:   Reuses a well-formed X-Request-ID header sent by a proxy, otherwise
       generates one; stores it in a ContextVar (for loggers and exception
       handlers) and on request.state, and sets X-Request-ID on the response.
"""

import re
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Incoming IDs end up in log lines, so only short plain tokens are accepted
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        incoming = request.headers.get("X-Request-ID", "")
        if _VALID_REQUEST_ID.match(incoming):
            rid = incoming
        else:
            rid = uuid.uuid4().hex[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
