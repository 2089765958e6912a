"""
Snippetbox — Panic Recovery Middleware
========================================

What:  Turns an exception that escapes a handler into a plain 500 response.
How:   Installed innermost (directly around the routes), so the response it
       produces still travels back through Session, Security Headers,
       Logging and Request ID like any other response.
Who:   Also supplies plain_error()/server_error() to the exception handlers
       registered in main.py.

500 responses carry `Connection: close`: the state left behind by the
failed request is unknown, so the connection is not reused. In debug mode
the body is the traceback instead of the reason phrase.
"""

import logging
import traceback
from http import HTTPStatus
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from snippetbox.config import Settings, settings as default_settings
from snippetbox.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)


def plain_error(status_code: int, body: Optional[str] = None, headers: Optional[dict] = None):
    """Plain-text error response carrying the standard reason phrase."""
    return PlainTextResponse(
        body if body is not None else HTTPStatus(status_code).phrase,
        status_code=status_code,
        headers=headers,
    )


def server_error(exc: Exception, debug: bool = False) -> Response:
    body = None
    if debug:
        body = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return plain_error(500, body=body, headers={"Connection": "close"})


class PanicRecoveryMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, config: Settings = default_settings, **kwargs):
        super().__init__(app, **kwargs)
        self.config = config

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            rid = request_id_var.get("")
            logger.error(
                "[%s] Unexpected error on %s %s: %s",
                rid,
                request.method,
                request.url.path,
                str(exc),
                exc_info=True,
            )
            return server_error(exc, debug=self.config.debug)
