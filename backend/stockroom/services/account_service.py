import logging
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from stockroom.config import APP_BASE_URL, RESET_TOKEN_EXPIRE_MINUTES, ROLES
from stockroom.exceptions import (
    Conflict,
    EmailNotFound,
    IncorrectPassword,
    InvalidRole,
    InvalidToken,
    NotFound,
    SelfDeletionDenied,
    ValidationError,
)
from stockroom.models.user import User
from stockroom.services.mailer import Mailer
from stockroom.utils.passwords import hash_password, verify_password
from stockroom.utils.reset_tokens import issue_reset_token, password_fingerprint, verify_reset_token
from stockroom.utils.session_store import SessionUser

logger = logging.getLogger(__name__)


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class AccountService:
    """Registration, login, user administration and password reset."""

    @staticmethod
    def register(db: Session, name: str, email: str, password: str, role: str) -> User:
        if any(_blank(v) for v in (name, email, password, role)):
            raise ValidationError("All fields required")
        if role not in ROLES:
            raise InvalidRole()

        # Fast path only; the unique constraint on users.email decides races
        if db.query(User).filter(User.email == email).first():
            raise Conflict("Email already registered")

        user = User(name=name, email=email, password_hash=hash_password(password), role=role)
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise Conflict("Email already registered")
        db.refresh(user)
        return user

    @staticmethod
    def authenticate(db: Session, email: Optional[str], password: Optional[str]) -> User:
        user = db.query(User).filter(User.email == email).first() if email else None
        if user is None:
            raise EmailNotFound("Email not registered")
        if not verify_password(password, user.password_hash):
            raise IncorrectPassword()
        return user

    @staticmethod
    def snapshot(user: User) -> SessionUser:
        return SessionUser(id=user.id, name=user.name, email=user.email, role=user.role)

    @staticmethod
    def list_users(db: Session) -> List[dict]:
        return [u.to_public_dict() for u in db.query(User).order_by(User.id).all()]

    @staticmethod
    def update_role(db: Session, user_id: int, role: Optional[str]) -> None:
        if role not in ROLES:
            raise InvalidRole()
        updated = db.query(User).filter(User.id == user_id).update({User.role: role}, synchronize_session=False)
        if updated == 0:
            db.rollback()
            raise NotFound("User not found")
        db.commit()

    @staticmethod
    def delete_user(db: Session, caller: SessionUser, user_id: int) -> None:
        if caller.id == user_id:
            raise SelfDeletionDenied()
        deleted = db.query(User).filter(User.id == user_id).delete(synchronize_session=False)
        if deleted == 0:
            db.rollback()
            raise NotFound("User not found")
        db.commit()

    @staticmethod
    def request_password_reset(db: Session, mailer: Mailer, email: Optional[str]) -> Optional[str]:
        """Issue a reset token for ``email`` and mail the link.

        Returns a preview of the link when the mailer only logs messages.
        """
        user = db.query(User).filter(User.email == email).first() if email else None
        if user is None:
            raise EmailNotFound("No account with that email", status_code=404)

        token = issue_reset_token(user.id, user.password_hash)
        reset_link = f"{APP_BASE_URL}/reset-password.html?token={token}"
        return mailer.send_password_reset(user.email, reset_link, RESET_TOKEN_EXPIRE_MINUTES)

    @staticmethod
    def reset_password(db: Session, token: Optional[str], new_password: Optional[str]) -> User:
        claims = verify_reset_token(token)
        if _blank(new_password):
            raise ValidationError("New password is required")

        user = db.query(User).filter(User.id == claims.user_id).first()
        if user is None:
            raise NotFound("User not found")
        current_hash = user.password_hash
        if password_fingerprint(current_hash) != claims.password_fingerprint:
            # Already redeemed, or the password changed since issue
            raise InvalidToken()

        # Compare-and-set on the old hash so two redemptions cannot both win
        updated = (
            db.query(User)
            .filter(User.id == user.id, User.password_hash == current_hash)
            .update({User.password_hash: hash_password(new_password)}, synchronize_session=False)
        )
        if updated == 0:
            db.rollback()
            raise InvalidToken()
        db.commit()
        db.refresh(user)
        return user
