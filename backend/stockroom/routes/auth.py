from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from stockroom.config import SESSION_COOKIE_NAME, SESSION_COOKIE_SECURE
from stockroom.database import get_db
from stockroom.exceptions import AppError
from stockroom.schemas import LoginRequest, RegisterRequest
from stockroom.services.account_service import AccountService
from stockroom.utils.audit_logger import client_info, log_event
from stockroom.utils.session_auth import SessionContext, get_session_context, get_session_store
from stockroom.utils.session_store import SessionStore

router = APIRouter(tags=["auth"])


@router.post("/register")
def register(request: Request, data: RegisterRequest, db: Session = Depends(get_db)):
    """Create an account"""
    ip_address, user_agent = client_info(request)
    user = AccountService.register(db, data.name, data.email, data.password, data.role)

    log_event(
        event_type="user_registered",
        ip_address=ip_address,
        user_id=user.id,
        email=user.email,
        user_agent=user_agent,
        details={"role": user.role},
        success=True,
        status_code=200,
    )
    return {"success": True, "message": "Registration successful"}


@router.post("/login")
def login(
    request: Request,
    response: Response,
    data: LoginRequest,
    db: Session = Depends(get_db),
    ctx: SessionContext = Depends(get_session_context),
    store: SessionStore = Depends(get_session_store),
):
    """Log in and start a session"""
    ip_address, user_agent = client_info(request)

    try:
        user = AccountService.authenticate(db, data.email, data.password)
    except AppError as e:
        log_event(
            event_type="login_failure",
            ip_address=ip_address,
            email=data.email,
            user_agent=user_agent,
            details={"reason": e.message},
            success=False,
            status_code=e.status_code,
        )
        raise

    # A fresh id on every login; any previous session on this cookie is dropped
    store.destroy(ctx.session_id)
    store.purge_expired()
    session_id = store.create(AccountService.snapshot(user))
    # Browser-session cookie; idle expiry is enforced by the store
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session_id,
        httponly=True,
        samesite="lax",
        secure=SESSION_COOKIE_SECURE,
    )

    log_event(
        event_type="login_success",
        ip_address=ip_address,
        user_id=user.id,
        email=user.email,
        user_agent=user_agent,
        success=True,
        status_code=200,
    )
    return {"success": True, "message": "Login successful"}


@router.get("/logout")
def logout(ctx: SessionContext = Depends(get_session_context), store: SessionStore = Depends(get_session_store)):
    """End the session (no-op without one) and go back to the login page"""
    store.destroy(ctx.session_id)
    response = RedirectResponse(url="/login", status_code=302)
    response.delete_cookie(SESSION_COOKIE_NAME, httponly=True, samesite="lax", secure=SESSION_COOKIE_SECURE)
    return response


@router.get("/current-user")
def current_user(ctx: SessionContext = Depends(get_session_context)):
    """Identity of the caller, or null"""
    if not ctx.authenticated:
        return {"success": False, "user": None}
    return {"success": True, "user": ctx.user.to_dict()}
