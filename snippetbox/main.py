"""
Snippetbox — FastAPI Application Factory
==========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn snippetbox.main:app),
       or through the `snippetbox` console script (run()).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware Chain:                                       │
    │  ┌────────┐ ┌─────────┐ ┌──────────────────┐ ┌─────────┐ │
    │  │ Req ID │→│ Logging │→│ Security headers │→│ Session │ │
    │  └────────┘ └─────────┘ └──────────────────┘ └─────────┘ │
    │                         → Panic recovery → routes        │
    │                                                          │
    │  Router dependencies: CSRF check → load authentication   │
    │                                                          │
    │  Routes:                                                 │
    │  /  /about  /snippet/*  /user/*  /account/*  /ping       │
    │  /static/* (StaticFiles)                                 │
    │                                                          │
    │  Exception Handlers:                                     │
    │  NotFound→404 │ CSRF/params→400 │ Auth→303 │ other→500   │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, configuration check, session cleanup task
    Shutdown: cancel cleanup task, dispose database engine
"""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager, suppress
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from snippetbox import __version__
from snippetbox.config import Settings, settings as default_settings
from snippetbox.database import dispose_engine
from snippetbox.exceptions import (
    AuthenticationRequired,
    CSRFError,
    DatabaseError,
    NotFoundError,
)
from snippetbox.middleware.logging import RequestLoggingMiddleware
from snippetbox.middleware.recovery import PanicRecoveryMiddleware, plain_error, server_error
from snippetbox.middleware.request_id import RequestIDMiddleware, request_id_var
from snippetbox.middleware.security_headers import SecurityHeadersMiddleware
from snippetbox.middleware.session import SessionMiddleware, get_session
from snippetbox.routes import account, health, snippets, users
from snippetbox.security import REDIRECT_SESSION_KEY
from snippetbox.services.session_store import build_session_store, run_cleanup
from snippetbox.templating import STATIC_DIR

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(config: Settings = default_settings) -> None:
    """
    Configure logging for the entire application.

    Called once during app startup, before anything else logs.
    Format: 2024-03-17T10:15:00 [INFO] snippetbox.access: ...
    """
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # snippetbox.access replaces uvicorn's own access log
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI, config: Settings = default_settings) -> None:
    """
    Map exceptions that escape handlers to responses.

    Handler hierarchy:
        NotFoundError (incl. NoRecordError)  → 404 Not Found
        CSRFError                            → 400 Bad Request
        RequestValidationError               → 400 Bad Request (malformed form/params)
        AuthenticationRequired               → 303 → /user/login
        HTTPException (routing 404/405 etc.) → same status, plain text
        DatabaseError                        → 500
        Exception (outside the routes)       → 500, Connection: close

    Error bodies are the bare reason phrase. The one exception is the
    catch-all 500 in debug mode, which carries the traceback.
    """

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return plain_error(404)

    @app.exception_handler(CSRFError)
    async def handle_csrf_error(request: Request, exc: CSRFError):
        rid = request_id_var.get("")
        logger.warning("[%s] CSRF check failed: %s", rid, exc.context)
        return plain_error(400)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Malformed request to %s: %s", rid, request.url.path, exc.errors())
        return plain_error(400)

    @app.exception_handler(AuthenticationRequired)
    async def handle_authentication_required(request: Request, exc: AuthenticationRequired):
        # Remember where to go after login; only pages that can be re-requested
        if request.method == "GET":
            get_session(request).put(REDIRECT_SESSION_KEY, exc.path)
        request.state.no_store = True
        return RedirectResponse("/user/login", status_code=303)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return plain_error(exc.status_code, headers=getattr(exc, "headers", None))

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return plain_error(500)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Last resort for failures outside the routes (e.g. the session store
        failing inside SessionMiddleware). Handler errors are caught earlier
        by PanicRecoveryMiddleware.
        """
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return server_error(exc, debug=config.debug)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(config: Settings = default_settings) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    session_store = build_session_store(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        setup_logging(config)
        logger.info("Snippetbox %s starting up...", __version__)

        try:
            config.validate_required_for_production()
        except ValueError as e:
            logger.warning("%s", str(e))

        cleanup = asyncio.create_task(
            run_cleanup(session_store, config.session_cleanup_interval)
        )
        logger.info("Server ready at http://%s:%d", config.host, config.port)

        yield

        logger.info("Snippetbox shutting down...")
        cleanup.cancel()
        with suppress(asyncio.CancelledError):
            await cleanup
        await dispose_engine()
        logger.info("Shutdown complete.")

    app = FastAPI(
        title="Snippetbox",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.session_store = session_store

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = outermost, so this reads bottom-up as the request sees it
    app.add_middleware(PanicRecoveryMiddleware, config=config)
    app.add_middleware(SessionMiddleware, store=session_store, config=config)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app, config)

    # ── Register Routes ───────────────────────────────────────────────────
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
    app.include_router(health.router)
    app.include_router(snippets.router)
    app.include_router(users.router)
    app.include_router(account.router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the module-level app with uvicorn."""
    import uvicorn

    uvicorn.run(
        "snippetbox.main:app",
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
    )
