"""
Snippetbox — Snippet Route Handlers
=====================================

What:  Home page, about page, snippet display and snippet creation.
Who:   Anonymous visitors can read; only authenticated users can create.

Flow (POST /snippet/create):
    parse form → validate → 422 re-render with errors
                          → insert → flash → 303 /snippet/view/{id}
"""

import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from snippetbox.database import get_db_session
from snippetbox.exceptions import NotFoundError
from snippetbox.middleware.session import get_session
from snippetbox.routes import PAGE_DEPENDENCIES
from snippetbox.schemas.forms import SnippetCreateForm
from snippetbox.security import require_authentication
from snippetbox.services.snippet_service import snippet_service
from snippetbox.templating import render

logger = logging.getLogger(__name__)

# snippets.id is a 32-bit INTEGER column
MAX_SNIPPET_ID = 2**31 - 1

router = APIRouter(tags=["Snippets"], dependencies=PAGE_DEPENDENCIES)


def _valid_snippet_id(value: str) -> bool:
    # Length is checked first; int() refuses very long digit strings
    if not (value.isascii() and value.isdigit()) or len(value) > len(str(MAX_SNIPPET_ID)):
        return False
    return 1 <= int(value) <= MAX_SNIPPET_ID


@router.get("/")
async def home(request: Request, db: AsyncSession = Depends(get_db_session)):
    snippets = await snippet_service.latest(db)
    return render(request, "home.html", {"snippets": snippets})


@router.get("/about")
async def about(request: Request):
    return render(request, "about.html")


@router.get("/snippet/view/{snippet_id}")
async def snippet_view(
    snippet_id: str,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
):
    """
    Show one snippet.

    The id is taken as a string and checked here, so that non-numeric ids,
    non-positive ids and ids beyond the column range are a 404 like any
    other missing snippet rather than a parameter validation error.
    """
    if not _valid_snippet_id(snippet_id):
        raise NotFoundError(resource="snippet", resource_id=snippet_id)

    snippet = await snippet_service.get(db, int(snippet_id))
    return render(request, "view.html", {"snippet": snippet})


@router.get("/snippet/create")
async def snippet_create(
    request: Request,
    user_id: int = Depends(require_authentication),
):
    return render(request, "create.html", {"form": SnippetCreateForm()})


@router.post("/snippet/create")
async def snippet_create_post(
    request: Request,
    expires: int = Form(...),
    title: str = Form(""),
    content: str = Form(""),
    user_id: int = Depends(require_authentication),
    db: AsyncSession = Depends(get_db_session),
):
    form = SnippetCreateForm(title=title, content=content, expires=expires)
    if not form.validate_fields():
        return render(request, "create.html", {"form": form}, status_code=422)

    snippet_id = await snippet_service.insert(
        db,
        title=form.title,
        content=form.content,
        expires_days=form.expires,
        user_id=user_id,
    )

    get_session(request).put("flash", "Snippet successfully created!")
    return RedirectResponse(f"/snippet/view/{snippet_id}", status_code=303)
