"""
Snippetbox — Account Handlers
===============================

What:  Account overview and password change, both behind the auth gate.
"""

import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from snippetbox.database import get_db_session
from snippetbox.exceptions import InvalidCredentialsError, NoRecordError
from snippetbox.middleware.session import get_session
from snippetbox.routes import PAGE_DEPENDENCIES
from snippetbox.schemas.forms import AccountPasswordUpdateForm
from snippetbox.security import require_authentication
from snippetbox.services.user_service import user_service
from snippetbox.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/account", tags=["Account"], dependencies=PAGE_DEPENDENCIES)


@router.get("/view")
async def account_view(
    request: Request,
    user_id: int = Depends(require_authentication),
    db: AsyncSession = Depends(get_db_session),
):
    try:
        user = await user_service.get(db, user_id)
    except NoRecordError:
        return RedirectResponse("/user/login", status_code=303)
    return render(request, "account.html", {"user": user})


@router.get("/password/update")
async def account_password_update(
    request: Request,
    user_id: int = Depends(require_authentication),
):
    return render(request, "password.html", {"form": AccountPasswordUpdateForm()})


@router.post("/password/update")
async def account_password_update_post(
    request: Request,
    current_password: str = Form(""),
    new_password: str = Form(""),
    new_password_confirmation: str = Form(""),
    user_id: int = Depends(require_authentication),
    db: AsyncSession = Depends(get_db_session),
):
    form = AccountPasswordUpdateForm(
        current_password=current_password,
        new_password=new_password,
        new_password_confirmation=new_password_confirmation,
    )
    if not form.validate_fields():
        return render(request, "password.html", {"form": form}, status_code=422)

    try:
        await user_service.password_update(
            db,
            user_id,
            current_password=form.current_password,
            new_password=form.new_password,
        )
    except InvalidCredentialsError:
        form.add_field_error("current_password", "Current password is incorrect")
        return render(request, "password.html", {"form": form}, status_code=422)

    get_session(request).put("flash", "Your password has been updated!")
    return RedirectResponse("/account/view", status_code=303)
