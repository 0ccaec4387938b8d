from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, Response, UploadFile, status
from sqlalchemy.orm import Session

from app.auth import token as token_service
from app.auth.gate import get_current_identity
from app.core.config import settings
from app.core.errors import unwrap
from app.core.result import AuthFailure, auth_error
from app.database import get_db
from app.schemas.user_schema import (
    AuthResponse,
    ChangePasswordRequest,
    Identity,
    LoginRequest,
    RefreshRequest,
    TokenPairResponse,
    UserResponse,
)
from app.services import accounts
from app.services.media import MediaStore, get_media_store

router = APIRouter(prefix="/api/users", tags=["Auth"])


def _set_auth_cookies(response: Response, tokens: token_service.TokenPair) -> None:
    common = dict(
        httponly=True,
        secure=settings.cookie_secure(),
        samesite=settings.COOKIE_SAMESITE,
        domain=settings.COOKIE_DOMAIN,
        path="/",
    )
    response.set_cookie(
        key=settings.ACCESS_COOKIE_NAME,
        value=tokens.access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRES_MINUTES * 60,
        **common,
    )
    response.set_cookie(
        key=settings.REFRESH_COOKIE_NAME,
        value=tokens.refresh_token,
        max_age=settings.REFRESH_TOKEN_EXPIRES_MINUTES * 60,
        **common,
    )


def _clear_auth_cookies(response: Response) -> None:
    for name in (settings.ACCESS_COOKIE_NAME, settings.REFRESH_COOKIE_NAME):
        response.delete_cookie(key=name, domain=settings.COOKIE_DOMAIN, path="/")


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    username: str = Form(...),
    email: str = Form(...),
    full_name: str = Form(...),
    password: str = Form(...),
    avatar: Optional[UploadFile] = File(None),
    cover_image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    media: MediaStore = Depends(get_media_store),
):
    return unwrap(accounts.register(db, media, username, email, full_name, password, avatar, cover_image))


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)):
    outcome = unwrap(accounts.login(db, payload.password, email=payload.email, username=payload.username))
    _set_auth_cookies(response, outcome.tokens)
    return AuthResponse(
        user=UserResponse.model_validate(outcome.user),
        access_token=outcome.tokens.access_token,
        refresh_token=outcome.tokens.refresh_token,
    )


@router.post("/logout")
def logout(response: Response, identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    unwrap(accounts.logout(db, identity))
    _clear_auth_cookies(response)
    return {"detail": "Logged out"}


@router.post("/refresh-token", response_model=TokenPairResponse)
def refresh_token(
    request: Request,
    response: Response,
    payload: Optional[RefreshRequest] = None,
    db: Session = Depends(get_db),
):
    presented = request.cookies.get(settings.REFRESH_COOKIE_NAME) or (payload.refresh_token if payload else None)
    if not presented:
        unwrap(auth_error(AuthFailure.MISSING, "Refresh token is required"))

    tokens = unwrap(token_service.rotate_refresh_token(db, presented))
    _set_auth_cookies(response, tokens)
    return TokenPairResponse(access_token=tokens.access_token, refresh_token=tokens.refresh_token)


@router.post("/change-password")
def change_password(
    payload: ChangePasswordRequest,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    unwrap(accounts.change_password(db, identity, payload.old_password, payload.new_password))
    return {"detail": "Password changed successfully"}
