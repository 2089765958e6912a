"""
Snippetbox — Request Security Dependencies
============================================

What:  CSRF protection and authentication state, as FastAPI dependencies.
How:   Page routers declare verify_csrf_token and load_authentication as
       router-level dependencies; protected handlers additionally depend on
       require_authentication.

CSRF (synchronizer token):
    Each session holds one random token (`csrf_token`). Templates embed it
    in a hidden `csrf_token` field of every form. State-changing requests
    must send it back (form field, or X-CSRF-Token header); the comparison
    is constant-time. Anything else is rejected with CSRFError → 400.

Authentication:
    Logging in stores the user's id under `authenticated_user_id`. On every
    request the id is re-checked against the users table, so a deleted
    account stops being authenticated immediately.
"""

import logging
import secrets
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from snippetbox.database import get_db_session
from snippetbox.exceptions import AuthenticationRequired, CSRFError
from snippetbox.middleware.session import get_session
from snippetbox.services.session_store import Session
from snippetbox.services.user_service import user_service

logger = logging.getLogger(__name__)

CSRF_SESSION_KEY = "csrf_token"
CSRF_FORM_FIELD = "csrf_token"
CSRF_HEADER = "X-CSRF-Token"
AUTH_SESSION_KEY = "authenticated_user_id"
REDIRECT_SESSION_KEY = "redirect_path_after_login"

SAFE_METHODS = {"GET", "HEAD", "OPTIONS", "TRACE"}


def csrf_token(session: Session) -> str:
    """Return the session's CSRF token, creating it on first use."""
    token = session.get(CSRF_SESSION_KEY)
    if not token:
        token = secrets.token_urlsafe(32)
        session.put(CSRF_SESSION_KEY, token)
    return token


async def verify_csrf_token(request: Request) -> None:
    """
    Reject unsafe requests whose CSRF token is missing or does not match.

    The form body has already been parsed by FastAPI for handlers that
    declare Form() parameters; request.form() returns that cached copy.

    Raises:
        CSRFError: Token missing from the session or the request, or unequal
    """
    if request.method in SAFE_METHODS:
        return

    expected = get_session(request).get(CSRF_SESSION_KEY)
    submitted = request.headers.get(CSRF_HEADER)
    if submitted is None:
        form = await request.form()
        value = form.get(CSRF_FORM_FIELD)
        submitted = value if isinstance(value, str) else None

    if not expected or not submitted or not secrets.compare_digest(expected, submitted):
        raise CSRFError(context={"path": request.url.path, "method": request.method})


async def load_authentication(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> Optional[int]:
    """
    Resolve the authenticated user for this request.

    Sets request.state.is_authenticated and request.state.user_id, and
    returns the user id (None for anonymous visitors).
    """
    request.state.is_authenticated = False
    request.state.user_id = None

    user_id = get_session(request).get(AUTH_SESSION_KEY)
    if user_id is None:
        return None

    if not await user_service.exists(db, user_id):
        logger.info("Session references missing user %s; treating as anonymous", user_id)
        return None

    request.state.is_authenticated = True
    request.state.user_id = user_id
    return user_id


async def require_authentication(
    request: Request,
    user_id: Optional[int] = Depends(load_authentication),
) -> int:
    """
    Auth gate for protected handlers.

    Raises:
        AuthenticationRequired: Visitor is not logged in (→ redirect to login)
    """
    if user_id is None:
        raise AuthenticationRequired(path=request.url.path)
    request.state.no_store = True
    return user_id


def is_authenticated(request: Request) -> bool:
    return getattr(request.state, "is_authenticated", False)


def safe_redirect_path(path: Optional[str]) -> Optional[str]:
    """Accept only local absolute paths (no scheme, no //host)."""
    if not path or not path.startswith("/") or path.startswith("//") or "\\" in path:
        return None
    return path
