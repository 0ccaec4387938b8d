# app/auth/gate.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.auth.token import verify_access_token
from app.core.config import settings
from app.core.errors import unwrap
from app.core.result import AuthFailure, Ok, Result, auth_error
from app.database import get_db
from app.models.user import User
from app.schemas.user_schema import Identity

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)  # don't auto-fail if no header


def extract_token(cookie_token: Optional[str], bearer_token: Optional[str]) -> Optional[str]:
    """
    Pick the single credential to check.

    The access-token cookie wins when present; the Authorization header is
    only read when there is no cookie at all. A present-but-bad cookie is
    not retried against the header.
    """
    if cookie_token:
        return cookie_token
    if bearer_token:
        return bearer_token
    return None


def authenticate(db: Session, cookie_token: Optional[str], bearer_token: Optional[str]) -> Result[Identity]:
    token = extract_token(cookie_token, bearer_token)
    if token is None:
        return auth_error(AuthFailure.MISSING, "Unauthorized request")

    verified = verify_access_token(token)
    if not verified.ok:
        logger.info("Access token rejected: %s", verified.error.reason.value)
        return verified

    user = db.get(User, verified.value.subject_id)
    if user is None:
        return auth_error(AuthFailure.USER_NOT_FOUND, "Invalid access token")
    return Ok(Identity.model_validate(user))


def _bearer(credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    return credentials.credentials if credentials else None


def get_current_identity(
    request: Request,
    db: Session = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Identity:
    """
    Resolve the caller from:
      1) Cookie: settings.ACCESS_COOKIE_NAME
      2) Authorization: Bearer <token>
    """
    cookie_token = request.cookies.get(settings.ACCESS_COOKIE_NAME)
    return unwrap(authenticate(db, cookie_token, _bearer(credentials)))


def get_optional_identity(
    request: Request,
    db: Session = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[Identity]:
    """Like get_current_identity, but anonymous and badly-credentialed callers get None."""
    cookie_token = request.cookies.get(settings.ACCESS_COOKIE_NAME)
    result = authenticate(db, cookie_token, _bearer(credentials))
    return result.value if result.ok else None
