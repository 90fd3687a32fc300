import logging
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from stockroom.config import ROLE_SHOPKEEPER
from stockroom.database import get_db
from stockroom.exceptions import AppError, ServerError
from stockroom.schemas import RoleUpdate
from stockroom.services.account_service import AccountService
from stockroom.utils.audit_logger import client_info, log_event
from stockroom.utils.session_auth import SessionContext, require_role

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])

require_shopkeeper = require_role(ROLE_SHOPKEEPER)


@router.get("")
def list_users(ctx: SessionContext = Depends(require_shopkeeper), db: Session = Depends(get_db)):
    """All users, without password hashes"""
    try:
        return {"status": "success", "users": AccountService.list_users(db)}
    except Exception as e:
        logger.exception("GET /api/users failed: %s", e)
        raise ServerError()


@router.put("/{user_id}")
def update_user_role(
    request: Request,
    user_id: int,
    data: RoleUpdate,
    ctx: SessionContext = Depends(require_shopkeeper),
    db: Session = Depends(get_db),
):
    """Change a user's role"""
    ip_address, user_agent = client_info(request)
    try:
        AccountService.update_role(db, user_id, data.role)
    except AppError:
        raise
    except Exception as e:
        db.rollback()
        logger.exception("PUT /api/users/%s failed: %s", user_id, e)
        raise ServerError()

    log_event(
        event_type="user_role_updated",
        ip_address=ip_address,
        user_id=ctx.user.id,
        email=ctx.user.email,
        user_agent=user_agent,
        resource=f"/api/users/{user_id}",
        action="PUT",
        details={"target_user_id": user_id, "role": data.role},
        success=True,
        status_code=200,
    )
    return {"status": "success", "message": "User role updated"}


@router.delete("/{user_id}", status_code=204)
def delete_user(
    request: Request,
    user_id: int,
    ctx: SessionContext = Depends(require_shopkeeper),
    db: Session = Depends(get_db),
):
    """Delete a user. Callers cannot delete themselves."""
    ip_address, user_agent = client_info(request)
    try:
        AccountService.delete_user(db, ctx.user, user_id)
    except AppError as e:
        log_event(
            event_type="user_delete_failure",
            ip_address=ip_address,
            user_id=ctx.user.id,
            email=ctx.user.email,
            user_agent=user_agent,
            resource=f"/api/users/{user_id}",
            action="DELETE",
            details={"reason": e.message},
            success=False,
            status_code=e.status_code,
        )
        raise
    except Exception as e:
        db.rollback()
        logger.exception("DELETE /api/users/%s failed: %s", user_id, e)
        raise ServerError()

    log_event(
        event_type="user_deleted",
        ip_address=ip_address,
        user_id=ctx.user.id,
        email=ctx.user.email,
        user_agent=user_agent,
        resource=f"/api/users/{user_id}",
        action="DELETE",
        details={"deleted_user_id": user_id},
        success=True,
        status_code=204,
    )
    return Response(status_code=204)
