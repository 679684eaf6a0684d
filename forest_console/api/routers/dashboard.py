"""
Router for the landing redirect and the dashboard.
"""
from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from forest_console.api.dependencies import OptionalSessionDep, SessionDep
from forest_console.web.templating import base_context, templates


router = APIRouter(tags=["dashboard"])


@router.get("/", include_in_schema=False)
async def root(session: OptionalSessionDep):
    """Send signed-in users to the dashboard and everyone else to sign in."""
    return RedirectResponse(url="/dashboard" if session else "/auth", status_code=303)


@router.get("/dashboard", response_class=HTMLResponse)
async def dashboard(request: Request, session: SessionDep):
    return templates.TemplateResponse(request, "dashboard.html", base_context(session))
