"""
Snippetbox — Template Rendering
=================================

What:  Jinja2 environment, template helpers and the per-request data every
       page receives.
How:   Jinja2Templates loads templates from snippetbox/templates with
       autoescaping on; compiled templates are cached by the environment
       after first use. render() merges the common template data with the
       page's own data and returns an HTMLResponse.

Common template data:
    current_year      footer copyright
    flash             one-shot message, removed from the session when shown
    is_authenticated  toggles the navigation links
    csrf_token        value for the hidden field in every form
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi.templating import Jinja2Templates
from starlette.requests import Request
from starlette.responses import HTMLResponse

from snippetbox.middleware.session import get_session
from snippetbox.security import csrf_token, is_authenticated

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
STATIC_DIR = Path(__file__).resolve().parent / "static"


def human_date(value: Optional[datetime]) -> str:
    """
    Format a timestamp for display, in UTC: '17 Mar 2024 at 10:15'.

    None renders as an empty string. Naive datetimes (as returned by SQLite)
    are taken to be UTC already.
    """
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%d %b %Y at %H:%M")


templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["human_date"] = human_date


def new_template_data(request: Request) -> Dict[str, Any]:
    session = get_session(request)
    return {
        "current_year": datetime.now(timezone.utc).year,
        "flash": session.pop("flash", ""),
        "is_authenticated": is_authenticated(request),
        "csrf_token": csrf_token(session),
    }


def render(
    request: Request,
    page: str,
    data: Optional[Dict[str, Any]] = None,
    status_code: int = 200,
) -> HTMLResponse:
    """
    Render pages/<page> with the common template data.

    Template errors propagate as exceptions and become a 500 through the
    catch-all handler; nothing is written to the client before rendering
    has finished.
    """
    context = new_template_data(request)
    if data:
        context.update(data)
    return templates.TemplateResponse(
        request,
        f"pages/{page}",
        context,
        status_code=status_code,
    )
