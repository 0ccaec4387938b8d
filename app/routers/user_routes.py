from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from app.auth.gate import get_current_identity, get_optional_identity
from app.core.errors import unwrap
from app.database import get_db
from app.models.user import User
from app.schemas.user_schema import ChannelProfile, Identity, UpdateAccountRequest, UserResponse
from app.schemas.video_schema import WatchHistoryItem
from app.services import accounts, aggregation
from app.services.media import MediaStore, get_media_store
from app.store import SQLStore

router = APIRouter(prefix="/api/users", tags=["User"])


@router.get("/me", response_model=UserResponse)
def get_my_user_info(identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    return db.get(User, identity.id)


@router.patch("/me", response_model=UserResponse)
def update_account(
    payload: UpdateAccountRequest,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return unwrap(accounts.update_account(
        db, identity, full_name=payload.full_name, email=payload.email, username=payload.username
    ))


@router.patch("/me/avatar", response_model=UserResponse)
def update_avatar(
    avatar: Optional[UploadFile] = File(None),
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    media: MediaStore = Depends(get_media_store),
):
    return unwrap(accounts.replace_image(db, media, identity, avatar, "avatar"))


@router.patch("/me/cover-image", response_model=UserResponse)
def update_cover_image(
    cover_image: Optional[UploadFile] = File(None),
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    media: MediaStore = Depends(get_media_store),
):
    return unwrap(accounts.replace_image(db, media, identity, cover_image, "cover_image"))


@router.get("/channel/{username}", response_model=ChannelProfile)
def get_channel_profile(
    username: str,
    viewer: Optional[Identity] = Depends(get_optional_identity),
    db: Session = Depends(get_db),
):
    return unwrap(aggregation.channel_profile(SQLStore(db), username, viewer))


@router.get("/history", response_model=list[WatchHistoryItem])
def get_watch_history(identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    return unwrap(aggregation.watch_history(SQLStore(db), identity.id))
