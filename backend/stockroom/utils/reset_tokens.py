"""
Password-reset tokens.

A reset token is a signed JWT (HS256, ``SECRET_KEY``) carrying the user id,
issue and expiry times, and a keyed fingerprint of the user's password hash
at issue time. Once the password changes the fingerprint no longer matches,
so a token can be redeemed at most once.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
import hashlib
import hmac

from jose import ExpiredSignatureError, JWTError, jwt

from stockroom.config import ALGORITHM, RESET_TOKEN_EXPIRE_MINUTES, SECRET_KEY
from stockroom.exceptions import InvalidToken, MissingToken, TokenExpired

RESET_PURPOSE = "password_reset"


@dataclass(frozen=True)
class ResetClaims:
    user_id: int
    password_fingerprint: str
    issued_at: datetime
    expires_at: datetime


def password_fingerprint(password_hash: str) -> str:
    """Keyed digest of a password hash; changes whenever the password does."""
    digest = hmac.new(SECRET_KEY.encode(), password_hash.encode(), hashlib.sha256)
    return digest.hexdigest()[:16]


def issue_reset_token(user_id: int, password_hash: str, expires_delta: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta if expires_delta is not None else timedelta(minutes=RESET_TOKEN_EXPIRE_MINUTES))
    claims = {
        "sub": str(user_id),
        "pwv": password_fingerprint(password_hash),
        "purpose": RESET_PURPOSE,
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(claims, SECRET_KEY, algorithm=ALGORITHM)


def verify_reset_token(token: Optional[str]) -> ResetClaims:
    """Check signature, expiry and shape of a reset token.

    Raises MissingToken, TokenExpired or InvalidToken.
    """
    if not token:
        raise MissingToken()
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise TokenExpired()
    except JWTError:
        raise InvalidToken()

    if payload.get("purpose") != RESET_PURPOSE:
        raise InvalidToken()
    try:
        user_id = int(payload["sub"])
        fingerprint = str(payload["pwv"])
        issued_at = datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc)
        expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
    except (KeyError, TypeError, ValueError):
        raise InvalidToken()

    # Valid strictly before the expiry instant
    if datetime.now(timezone.utc) >= expires_at:
        raise TokenExpired()

    return ResetClaims(
        user_id=user_id,
        password_fingerprint=fingerprint,
        issued_at=issued_at,
        expires_at=expires_at,
    )
