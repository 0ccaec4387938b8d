import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from app.auth.gate import get_current_identity, get_optional_identity
from app.database import get_db
from app.models.comment import Comment
from app.models.user import User
from app.models.video import Video
from app.models.watch_history import WatchHistoryEntry
from app.routers.ownership import fetch_owned, require_text
from app.schemas.user_schema import Identity
from app.schemas.video_schema import VideoOut, VideoUpdate
from app.services.media import MediaStore, get_media_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/videos", tags=["Videos"])


def _visible_video(db: Session, video_id: int, viewer: Optional[Identity]) -> Video:
    video = db.get(Video, video_id)
    # drafts are only visible to their owner
    if video is None or (not video.is_published and (viewer is None or viewer.id != video.owner_id)):
        raise HTTPException(status_code=404, detail="Video not found")
    return video


@router.post("/", response_model=VideoOut, status_code=status.HTTP_201_CREATED)
def publish_video(
    title: str = Form(...),
    description: str = Form(""),
    is_published: bool = Form(True),
    duration: Optional[float] = Form(None),
    video_file: UploadFile = File(...),
    thumbnail: UploadFile = File(...),
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    media: MediaStore = Depends(get_media_store),
):
    require_text(title=title)

    video_upload = media.store(video_file, "videos")
    if video_upload is None:
        raise HTTPException(status_code=400, detail="Video upload failed")
    thumbnail_upload = media.store(thumbnail, "thumbnails")
    if thumbnail_upload is None:
        raise HTTPException(status_code=400, detail="Thumbnail upload failed")

    video = Video(
        owner_id=identity.id,
        title=title.strip(),
        description=description.strip(),
        video_file=video_upload.url,
        thumbnail=thumbnail_upload.url,
        duration=video_upload.duration or duration or 0,
        is_published=is_published,
    )
    db.add(video)
    db.commit()
    db.refresh(video)
    return video


@router.get("/channel/{username}", response_model=list[VideoOut])
def get_channel_videos(username: str, viewer: Optional[Identity] = Depends(get_optional_identity), db: Session = Depends(get_db)):
    owner = db.query(User).filter(User.username == username.strip().lower()).first()
    if not owner:
        raise HTTPException(status_code=404, detail="User not found")

    query = db.query(Video).filter(Video.owner_id == owner.id)
    if viewer is None or viewer.id != owner.id:
        query = query.filter(Video.is_published.is_(True))
    return query.order_by(Video.created_at.desc(), Video.id.desc()).all()


@router.get("/{video_id}", response_model=VideoOut)
def get_video_by_id(video_id: int, viewer: Optional[Identity] = Depends(get_optional_identity), db: Session = Depends(get_db)):
    return _visible_video(db, video_id, viewer)


@router.post("/{video_id}/views", response_model=VideoOut)
def record_view(video_id: int, identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    video = _visible_video(db, video_id, identity)
    video.views += 1
    db.add(WatchHistoryEntry(user_id=identity.id, video_id=video.id))
    db.commit()
    db.refresh(video)
    return video


@router.patch("/{video_id}", response_model=VideoOut)
def update_video(
    video_id: int,
    payload: VideoUpdate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    if not (payload.title or "").strip() and not (payload.description or "").strip():
        raise HTTPException(status_code=400, detail="At least one field is required")

    video = fetch_owned(db, Video, video_id, identity, "Video")
    if (payload.title or "").strip():
        video.title = payload.title.strip()
    if (payload.description or "").strip():
        video.description = payload.description.strip()
    db.commit()
    db.refresh(video)
    return video


@router.patch("/{video_id}/thumbnail", response_model=VideoOut)
def update_thumbnail(
    video_id: int,
    thumbnail: UploadFile = File(...),
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
    media: MediaStore = Depends(get_media_store),
):
    video = fetch_owned(db, Video, video_id, identity, "Video")
    upload = media.store(thumbnail, "thumbnails")
    if upload is None:
        raise HTTPException(status_code=400, detail="Thumbnail upload failed")
    video.thumbnail = upload.url
    db.commit()
    db.refresh(video)
    return video


@router.patch("/{video_id}/publish", response_model=VideoOut)
def toggle_publish_status(video_id: int, identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    video = fetch_owned(db, Video, video_id, identity, "Video")
    video.is_published = not video.is_published
    db.commit()
    db.refresh(video)
    return video


@router.delete("/{video_id}")
def delete_video(video_id: int, identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    video = fetch_owned(db, Video, video_id, identity, "Video")
    # likes, history entries and playlist slots may keep pointing at it; readers skip them
    db.query(Comment).filter(Comment.video_id == video.id).delete(synchronize_session=False)
    db.delete(video)
    db.commit()
    logger.info("Deleted video_id=%s", video_id)
    return {"message": "Video deleted successfully"}
