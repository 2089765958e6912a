"""
Snippetbox — Common Security Headers Middleware
=================================================

What:  Adds the same set of browser security headers to every response.
How:   Headers are set after the handler runs, so handlers never need to
       think about them. Pages behind the auth gate additionally get
       `Cache-Control: no-store` (flag set by require_authentication) so a
       shared browser cannot show them from cache after logout.

Headers:
    Content-Security-Policy  only self-hosted assets, plus Google Fonts
    Referrer-Policy          full URL for same origin, origin only elsewhere
    X-Content-Type-Options   no MIME sniffing
    X-Frame-Options          no framing (clickjacking)
    X-XSS-Protection: 0      legacy auditor disabled; CSP covers this
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

SECURITY_HEADERS = {
    "Content-Security-Policy": (
        "default-src 'self'; style-src 'self' fonts.googleapis.com; font-src fonts.gstatic.com"
    ),
    "Referrer-Policy": "origin-when-cross-origin",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "deny",
    "X-XSS-Protection": "0",
    "Server": "snippetbox",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)

        for name, value in SECURITY_HEADERS.items():
            response.headers[name] = value

        if getattr(request.state, "no_store", False):
            response.headers["Cache-Control"] = "no-store"

        return response
