"""
Snippetbox — Signup, Login and Logout Handlers
================================================

Session changes on authentication:
    Login and logout both renew the session token before touching
    `authenticated_user_id`, so a token issued to an anonymous visitor never
    becomes an authenticated one (session fixation).

After login the user goes back to the protected page that sent them to the
login form, if any, otherwise to the snippet creation form.
"""

import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from snippetbox.database import get_db_session
from snippetbox.exceptions import DuplicateEmailError, InvalidCredentialsError
from snippetbox.middleware.session import get_session
from snippetbox.routes import PAGE_DEPENDENCIES
from snippetbox.schemas.forms import UserLoginForm, UserSignupForm
from snippetbox.security import (
    AUTH_SESSION_KEY,
    REDIRECT_SESSION_KEY,
    require_authentication,
    safe_redirect_path,
)
from snippetbox.services.user_service import user_service
from snippetbox.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["Users"], dependencies=PAGE_DEPENDENCIES)


@router.get("/signup")
async def user_signup(request: Request):
    return render(request, "signup.html", {"form": UserSignupForm()})


@router.post("/signup")
async def user_signup_post(
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    db: AsyncSession = Depends(get_db_session),
):
    form = UserSignupForm(name=name, email=email, password=password)
    if not form.validate_fields():
        return render(request, "signup.html", {"form": form}, status_code=422)

    try:
        await user_service.insert(db, name=form.name, email=form.email, password=form.password)
    except DuplicateEmailError:
        form.add_field_error("email", "Email address is already in use")
        return render(request, "signup.html", {"form": form}, status_code=422)

    get_session(request).put("flash", "Your signup was successful. Please log in.")
    return RedirectResponse("/user/login", status_code=303)


@router.get("/login")
async def user_login(request: Request):
    return render(request, "login.html", {"form": UserLoginForm()})


@router.post("/login")
async def user_login_post(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    db: AsyncSession = Depends(get_db_session),
):
    form = UserLoginForm(email=email, password=password)
    if not form.validate_fields():
        return render(request, "login.html", {"form": form}, status_code=422)

    try:
        user_id = await user_service.authenticate(db, email=form.email, password=form.password)
    except InvalidCredentialsError:
        form.add_non_field_error("Email or password is incorrect")
        return render(request, "login.html", {"form": form}, status_code=422)

    session = get_session(request)
    session.renew_token()
    session.put(AUTH_SESSION_KEY, user_id)
    logger.info("User %s logged in", user_id)

    next_path = safe_redirect_path(session.pop(REDIRECT_SESSION_KEY))
    return RedirectResponse(next_path or "/snippet/create", status_code=303)


@router.post("/logout")
async def user_logout_post(
    request: Request,
    user_id: int = Depends(require_authentication),
):
    session = get_session(request)
    session.renew_token()
    session.remove(AUTH_SESSION_KEY)
    session.put("flash", "You've been logged out successfully!")
    logger.info("User %s logged out", user_id)
    return RedirectResponse("/", status_code=303)
