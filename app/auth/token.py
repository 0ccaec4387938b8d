# app/auth/token.py
from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.result import AuthFailure, Ok, Result, auth_error
from app.models.user import User

logger = logging.getLogger(__name__)

ALGORITHM = settings.JWT_ALG
ACCESS = "access"
REFRESH = "refresh"


@dataclass(frozen=True)
class TokenClaims:
    subject_id: int
    issued_at: datetime
    expires_at: datetime
    token_type: str
    token_id: str


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


def _secret_for(token_type: str) -> str:
    return settings.REFRESH_TOKEN_SECRET if token_type == REFRESH else settings.JWT_SECRET


def fingerprint(token: str) -> str:
    """What the user row stores instead of the raw refresh token."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _encode(user: User, token_type: str, lifetime: timedelta, extra: Optional[dict] = None) -> str:
    now = datetime.now(timezone.utc)
    to_encode = dict(extra or {})
    to_encode.update({
        "sub": str(user.id),
        "iat": int(now.timestamp()),
        "exp": int((now + lifetime).timestamp()),
        "type": token_type,
        # random id keeps two tokens minted in the same second distinct
        "jti": secrets.token_hex(16),
    })
    return jwt.encode(to_encode, _secret_for(token_type), algorithm=ALGORITHM)


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRES_MINUTES)
    return _encode(user, ACCESS, lifetime, {"username": user.username, "email": user.email})


def create_refresh_token(db: Session, user: User, expires_delta: Optional[timedelta] = None) -> str:
    """Mint a refresh token and make it the user's only live one."""
    lifetime = expires_delta or timedelta(minutes=settings.REFRESH_TOKEN_EXPIRES_MINUTES)
    token = _encode(user, REFRESH, lifetime)
    user.refresh_token_fingerprint = fingerprint(token)
    db.commit()
    return token


def issue_token_pair(db: Session, user: User) -> TokenPair:
    return TokenPair(
        access_token=create_access_token(user),
        refresh_token=create_refresh_token(db, user),
    )


def decode_token(token: str, token_type: str) -> Result[TokenClaims]:
    if not token:
        return auth_error(AuthFailure.MISSING, "Unauthorized request")
    try:
        payload = jwt.decode(token, _secret_for(token_type), algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        return auth_error(AuthFailure.EXPIRED, "Token has expired")
    except JWTError:
        return auth_error(AuthFailure.INVALID_SIGNATURE, "Invalid token")

    sub = payload.get("sub")
    if payload.get("type") != token_type or sub is None or not str(sub).isdigit():
        return auth_error(AuthFailure.INVALID_SIGNATURE, "Invalid token payload")

    return Ok(TokenClaims(
        subject_id=int(sub),
        issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        token_type=token_type,
        token_id=payload.get("jti", ""),
    ))


def verify_access_token(token: str) -> Result[TokenClaims]:
    return decode_token(token, ACCESS)


def rotate_refresh_token(db: Session, presented: str) -> Result[TokenPair]:
    """
    Exchange a live refresh token for a new access/refresh pair.

    The presented token must still be the one whose fingerprint sits on the
    user row. A token superseded by a later login, a previous rotation, or a
    logout is rejected as revoked even though its signature verifies.

    The swap itself is a conditional UPDATE keyed on the old fingerprint, so
    of two rotations racing on the same token at most one can win; the loser
    sees zero rows updated and is treated as revoked.
    """
    decoded = decode_token(presented, REFRESH)
    if not decoded.ok:
        return decoded
    claims = decoded.value

    user = db.get(User, claims.subject_id)
    if user is None:
        return auth_error(AuthFailure.USER_NOT_FOUND, "Invalid refresh token")

    presented_fp = fingerprint(presented)
    stored_fp = user.refresh_token_fingerprint
    if not stored_fp or not hmac.compare_digest(presented_fp, stored_fp):
        logger.warning("Refresh token reuse rejected for user_id=%s", user.id)
        return auth_error(AuthFailure.REVOKED, "Refresh token is expired or used")

    new_refresh = _encode(user, REFRESH, timedelta(minutes=settings.REFRESH_TOKEN_EXPIRES_MINUTES))
    swapped = (
        db.query(User)
        .filter(User.id == user.id, User.refresh_token_fingerprint == presented_fp)
        .update({User.refresh_token_fingerprint: fingerprint(new_refresh)}, synchronize_session=False)
    )
    if swapped != 1:
        db.rollback()
        logger.warning("Lost refresh rotation race for user_id=%s", user.id)
        return auth_error(AuthFailure.REVOKED, "Refresh token is expired or used")
    db.commit()
    db.refresh(user)

    return Ok(TokenPair(access_token=create_access_token(user), refresh_token=new_refresh))


def revoke(db: Session, user_id: int) -> None:
    db.query(User).filter(User.id == user_id).update(
        {User.refresh_token_fingerprint: None}, synchronize_session=False
    )
    db.commit()
