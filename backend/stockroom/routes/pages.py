import os
from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse, RedirectResponse
from stockroom.utils.session_auth import SessionContext, get_session_context

router = APIRouter(tags=["pages"])

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")


def _page(name: str) -> FileResponse:
    return FileResponse(os.path.join(TEMPLATE_DIR, name), media_type="text/html")


@router.get("/", include_in_schema=False)
def root():
    return RedirectResponse(url="/login", status_code=302)


@router.get("/login", include_in_schema=False)
def login_page():
    return _page("login.html")


@router.get("/registration", include_in_schema=False)
def registration_page():
    return _page("registration.html")


@router.get("/dashboard", include_in_schema=False)
def dashboard_page(ctx: SessionContext = Depends(get_session_context)):
    """Dashboard for signed-in users; everyone else goes to the login page"""
    if not ctx.authenticated:
        return RedirectResponse(url="/login", status_code=302)
    return _page("dashboard.html")


@router.get("/reset-password.html", include_in_schema=False)
def reset_password_page():
    return _page("reset-password.html")
