# services/accounts.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import UploadFile
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.auth import token as token_service
from app.auth.passwords import check_password, hash_password
from app.core.result import AuthFailure, Ok, Result, auth_error, conflict, validation_error
from app.models.user import User
from app.schemas.user_schema import Identity
from app.services.media import MediaStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginOutcome:
    user: User
    tokens: token_service.TokenPair


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72


def _too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def verify_password(user: User, candidate: str) -> bool:
    return check_password(candidate, user.password_hash)


def ensure_unique_username(db: Session, username: str, exclude_user_id: Optional[int] = None) -> Result[None]:
    query = db.query(User.id).filter(func.lower(User.username) == username.strip().lower())
    if exclude_user_id is not None:
        query = query.filter(User.id != exclude_user_id)
    if query.first() is not None:
        return conflict("Username already exists")
    return Ok(None)


def ensure_unique_email(db: Session, email: str, exclude_user_id: Optional[int] = None) -> Result[None]:
    query = db.query(User.id).filter(func.lower(User.email) == email.strip().lower())
    if exclude_user_id is not None:
        query = query.filter(User.id != exclude_user_id)
    if query.first() is not None:
        return conflict("Email already exists")
    return Ok(None)


def _load_user(db: Session, identity: Identity) -> Result[User]:
    user = db.get(User, identity.id)
    if user is None:
        return auth_error(AuthFailure.USER_NOT_FOUND, "User no longer exists")
    return Ok(user)


def _commit_unique(db: Session, user: User) -> Result[User]:
    # the pre-checks can race; the unique indexes have the final word
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return conflict("Username or email already exists")
    db.refresh(user)
    return Ok(user)


def register(
    db: Session,
    media: MediaStore,
    username: str,
    email: str,
    full_name: str,
    password: str,
    avatar: Optional[UploadFile],
    cover_image: Optional[UploadFile] = None,
) -> Result[User]:
    if any(_blank(v) for v in (username, email, full_name, password)):
        return validation_error("All fields are required")
    if _too_long(password):
        return validation_error("Password must be at most 72 bytes")

    for check in (ensure_unique_username(db, username), ensure_unique_email(db, email)):
        if not check.ok:
            return check

    if avatar is None:
        return validation_error("Avatar is required")
    avatar_upload = media.store(avatar, "avatars")
    if avatar_upload is None:
        return validation_error("Avatar upload failed")
    cover_upload = media.store(cover_image, "covers") if cover_image is not None else None

    user = User(
        username=username.strip().lower(),
        email=email.strip().lower(),
        full_name=full_name.strip(),
        password_hash=hash_password(password),
        avatar=avatar_upload.url,
        cover_image=cover_upload.url if cover_upload else "",
    )
    db.add(user)
    created = _commit_unique(db, user)
    if created.ok:
        logger.info("Registered user_id=%s", user.id)
    return created


def login(db: Session, password: str, email: Optional[str] = None, username: Optional[str] = None) -> Result[LoginOutcome]:
    if _blank(email) and _blank(username):
        return validation_error("Username or email is required")
    if _blank(password):
        return validation_error("Password is required")

    query = db.query(User)
    if not _blank(email):
        user = query.filter(func.lower(User.email) == email.strip().lower()).first()
    else:
        user = query.filter(func.lower(User.username) == username.strip().lower()).first()

    # same answer for unknown account and wrong password
    if user is None or not verify_password(user, password):
        logger.info("Failed login for %s", email or username)
        return auth_error(AuthFailure.BAD_CREDENTIALS, "Invalid user credentials")

    return Ok(LoginOutcome(user=user, tokens=token_service.issue_token_pair(db, user)))


def logout(db: Session, identity: Identity) -> Result[None]:
    token_service.revoke(db, identity.id)
    return Ok(None)


def change_password(db: Session, identity: Identity, old_password: str, new_password: str) -> Result[None]:
    if _blank(old_password) or _blank(new_password):
        return validation_error("Old and new password are required")
    if new_password == old_password:
        return validation_error("New password must be different from the old password")
    if _too_long(new_password):
        return validation_error("Password must be at most 72 bytes")

    loaded = _load_user(db, identity)
    if not loaded.ok:
        return loaded
    user = loaded.value
    if not verify_password(user, old_password):
        return auth_error(AuthFailure.BAD_CREDENTIALS, "Invalid old password")

    user.password_hash = hash_password(new_password)
    db.commit()
    return Ok(None)


def update_account(
    db: Session,
    identity: Identity,
    full_name: Optional[str] = None,
    email: Optional[str] = None,
    username: Optional[str] = None,
) -> Result[User]:
    if all(_blank(v) for v in (full_name, email, username)):
        return validation_error("At least one field is required")

    loaded = _load_user(db, identity)
    if not loaded.ok:
        return loaded
    user = loaded.value

    if not _blank(username):
        check = ensure_unique_username(db, username, exclude_user_id=user.id)
        if not check.ok:
            return check
        user.username = username.strip().lower()
    if not _blank(email):
        check = ensure_unique_email(db, email, exclude_user_id=user.id)
        if not check.ok:
            return check
        user.email = email.strip().lower()
    if not _blank(full_name):
        user.full_name = full_name.strip()

    return _commit_unique(db, user)


def replace_image(db: Session, media: MediaStore, identity: Identity, file: Optional[UploadFile], field: str) -> Result[User]:
    """Upload a new avatar or cover image and point the user at it."""
    label = "Avatar" if field == "avatar" else "Cover image"
    if file is None:
        return validation_error(f"{label} file is missing")

    loaded = _load_user(db, identity)
    if not loaded.ok:
        return loaded
    user = loaded.value

    upload = media.store(file, "avatars" if field == "avatar" else "covers")
    if upload is None:
        return validation_error(f"{label} upload failed")
    setattr(user, field, upload.url)
    db.commit()
    db.refresh(user)
    return Ok(user)
