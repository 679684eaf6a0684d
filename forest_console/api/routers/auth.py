"""
Router for sign-in, sign-up and sign-out.
"""
import logging

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from forest_console.api.dependencies import (
    AuthServiceDep,
    OptionalSessionDep,
    ViewRegistryDep,
)
from forest_console.api.limiter import limiter
from forest_console.api.models.forms import LoginForm, SignupForm, first_error_message
from forest_console.config import settings
from forest_console.domain.session import SessionContext
from forest_console.services.application.auth_service import AuthError
from forest_console.web.templating import base_context, templates

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

AUTH_RATE_LIMIT = f"{settings.rate_limit_requests}/minute"


def _render_auth(request: Request, mode: str, error: str = "", username: str = "", status_code: int = 200):
    context = base_context(None)
    context.update({"mode": mode, "error": error, "username": username})
    return templates.TemplateResponse(request, "auth.html", context, status_code=status_code)


def _sign_in(request: Request, context: SessionContext, registry) -> RedirectResponse:
    previous = SessionContext.from_session(request.session)
    if previous is not None:
        registry.discard_session(previous.session_id)
    context.store(request.session)
    logger.info("Signed in %s", context.username or "user")
    return RedirectResponse(url="/dashboard", status_code=303)


@router.get("", response_class=HTMLResponse, summary="Sign-in page")
async def auth_page(request: Request, session: OptionalSessionDep, mode: str = "login"):
    if session is not None:
        return RedirectResponse(url="/dashboard", status_code=303)
    return _render_auth(request, "signup" if mode == "signup" else "login")


@router.post("/login", response_class=HTMLResponse)
@limiter.limit(AUTH_RATE_LIMIT)
async def login(request: Request, auth_service: AuthServiceDep, registry: ViewRegistryDep):
    submitted = await request.form()
    username = submitted.get("username", "")
    try:
        form = LoginForm(username=username, password=submitted.get("password", ""))
    except ValidationError as e:
        return _render_auth(request, "login", first_error_message(e), username, status_code=422)

    try:
        context = await auth_service.login(form)
    except AuthError as e:
        return _render_auth(request, "login", str(e), username, status_code=401)
    return _sign_in(request, context, registry)


@router.post("/signup", response_class=HTMLResponse)
@limiter.limit(AUTH_RATE_LIMIT)
async def signup(request: Request, auth_service: AuthServiceDep, registry: ViewRegistryDep):
    submitted = await request.form()
    username = submitted.get("username", "")
    try:
        form = SignupForm(
            username=username,
            email=submitted.get("email", ""),
            password=submitted.get("password", ""),
            confirm_password=submitted.get("confirm_password", ""),
            agree_to_terms="agree_to_terms" in submitted,
        )
    except ValidationError as e:
        return _render_auth(request, "signup", first_error_message(e), username, status_code=422)

    try:
        context = await auth_service.signup(form)
    except AuthError as e:
        return _render_auth(request, "signup", str(e), username, status_code=400)
    return _sign_in(request, context, registry)


@router.post("/logout")
async def logout(request: Request, session: OptionalSessionDep, registry: ViewRegistryDep):
    if session is not None:
        registry.discard_session(session.session_id)
    SessionContext.clear(request.session)
    return RedirectResponse(url="/auth", status_code=303)
