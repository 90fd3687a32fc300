import logging
from typing import Optional, Dict, Any
from fastapi import Request

audit_logger = logging.getLogger("stockroom.audit")


def client_info(request: Request):
    """Return (ip_address, user_agent) for a request."""
    ip_address = request.client.host if request.client else "unknown"
    user_agent = request.headers.get("user-agent", "unknown")
    return ip_address, user_agent


def log_event(
    event_type: str,
    ip_address: str,
    user_id: Optional[int] = None,
    email: Optional[str] = None,
    user_agent: Optional[str] = None,
    resource: Optional[str] = None,
    action: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    success: bool = False,
    status_code: Optional[int] = None,
):
    """Record a security-relevant event on the audit logger."""
    level = logging.INFO if success else logging.WARNING
    audit_logger.log(
        level,
        "%s user_id=%s email=%s ip=%s resource=%s action=%s status=%s details=%s",
        event_type,
        user_id,
        email,
        ip_address,
        resource,
        action,
        status_code,
        details or {},
        extra={
            "event_type": event_type,
            "user_agent": user_agent,
            "success": success,
        },
    )
