"""
Snippetbox — Session Middleware
=================================

What:  Loads the server-side session named by the session cookie before the
       handler runs and persists it afterwards.
How:   request.state.session holds a Session (see services/session_store.py).
       After the response is produced:
         - destroyed sessions: record deleted, cookie expired
         - modified sessions:  record committed, cookie (re)written
         - untouched sessions: nothing happens, no cookie is sent

Cookie attributes:
    HttpOnly, SameSite=Lax, Path=/, Secure (settings.secure_cookies),
    Max-Age = seconds left until the session deadline.
"""

import logging
from datetime import datetime, timezone

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from snippetbox.config import Settings, settings as default_settings
from snippetbox.services.session_store import (
    Session,
    SessionStore,
    generate_token,
    new_deadline,
)

logger = logging.getLogger(__name__)


def get_session(request: Request) -> Session:
    """FastAPI dependency (and helper) returning the request's Session."""
    return request.state.session


class SessionMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, store: SessionStore, config: Settings = default_settings, **kwargs):
        super().__init__(app, **kwargs)
        self.store = store
        self.config = config

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        cookie_name = self.config.session_cookie_name
        session = await self.store.load(request.cookies.get(cookie_name))
        request.state.session = session

        response = await call_next(request)

        if session.previous_token:
            await self.store.delete(session.previous_token)

        if session.destroyed:
            if session.token:
                await self.store.delete(session.token)
            response.delete_cookie(
                cookie_name,
                path="/",
                secure=self.config.secure_cookies,
                httponly=True,
                samesite="lax",
            )
            return response

        if session.modified:
            if session.token is None:
                session.token = generate_token()
            if session.deadline is None:
                session.deadline = new_deadline(self.config)

            await self.store.commit(session.token, session.data, session.deadline)

            max_age = int((session.deadline - datetime.now(timezone.utc)).total_seconds())
            response.set_cookie(
                cookie_name,
                session.token,
                max_age=max(max_age, 0),
                path="/",
                secure=self.config.secure_cookies,
                httponly=True,
                samesite="lax",
            )

        return response
