"""
Session authentication dependencies.

Handlers receive the caller's identity explicitly as a ``SessionContext``
instead of reaching into global request state.
"""

from dataclasses import dataclass
from typing import Optional
from fastapi import Depends, Request
from stockroom.config import SESSION_COOKIE_NAME
from stockroom.exceptions import Forbidden, Unauthorized
from stockroom.utils.session_store import SessionStore, SessionUser, session_store


@dataclass
class SessionContext:
    session_id: Optional[str]
    user: Optional[SessionUser]

    @property
    def authenticated(self) -> bool:
        return self.user is not None


def get_session_store() -> SessionStore:
    return session_store


def get_session_context(request: Request, store: SessionStore = Depends(get_session_store)) -> SessionContext:
    """Resolve the session cookie to a context. Never fails; anonymous callers get ``user=None``."""
    session_id = request.cookies.get(SESSION_COOKIE_NAME)
    return SessionContext(session_id=session_id, user=store.get(session_id))


def require_user(ctx: SessionContext = Depends(get_session_context)) -> SessionContext:
    """Require an active session, else 401."""
    if not ctx.authenticated:
        raise Unauthorized()
    return ctx


def require_role(*roles: str):
    """Build a dependency that requires an active session whose role is in ``roles``."""
    allowed = set(roles)

    def _dependency(ctx: SessionContext = Depends(require_user)) -> SessionContext:
        if ctx.user.role not in allowed:
            raise Forbidden()
        return ctx

    return _dependency
