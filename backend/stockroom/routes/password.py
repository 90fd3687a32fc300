from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from stockroom.database import get_db
from stockroom.exceptions import AppError
from stockroom.schemas import ForgotPasswordRequest, ResetPasswordRequest
from stockroom.services.account_service import AccountService
from stockroom.services.mailer import Mailer, get_mailer
from stockroom.utils.audit_logger import client_info, log_event

router = APIRouter(tags=["password"])


@router.post("/api/forgot-password")
def forgot_password(
    request: Request,
    data: ForgotPasswordRequest,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    """Mail a password-reset link"""
    ip_address, user_agent = client_info(request)
    preview = AccountService.request_password_reset(db, mailer, data.email)

    log_event(
        event_type="password_reset_requested",
        ip_address=ip_address,
        email=data.email,
        user_agent=user_agent,
        success=True,
        status_code=200,
    )
    body = {"message": "Password reset email sent"}
    if preview:
        body["preview"] = preview
    return body


@router.post("/reset-password")
def reset_password(request: Request, data: ResetPasswordRequest, db: Session = Depends(get_db)):
    """Redeem a reset token and set a new password"""
    ip_address, user_agent = client_info(request)
    try:
        user = AccountService.reset_password(db, data.token, data.new_password)
    except AppError as e:
        log_event(
            event_type="password_reset_failure",
            ip_address=ip_address,
            user_agent=user_agent,
            details={"reason": e.message},
            success=False,
            status_code=e.status_code,
        )
        raise

    log_event(
        event_type="password_reset",
        ip_address=ip_address,
        user_id=user.id,
        email=user.email,
        user_agent=user_agent,
        success=True,
        status_code=200,
    )
    return {"message": "Password has been reset successfully"}
