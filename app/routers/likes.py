from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth.gate import get_current_identity
from app.core.errors import unwrap
from app.database import get_db
from app.models.like import LikeTarget
from app.schemas.content_schema import ToggleResult
from app.schemas.user_schema import Identity
from app.schemas.video_schema import VideoSummary
from app.services import aggregation, edges
from app.store import SQLStore

router = APIRouter(prefix="/api/likes", tags=["Likes"])


@router.post("/toggle/v/{video_id}", response_model=ToggleResult)
def toggle_video_like(video_id: int, identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    return ToggleResult(active=unwrap(edges.toggle_like(db, identity, LikeTarget.video, video_id)))


@router.post("/toggle/c/{comment_id}", response_model=ToggleResult)
def toggle_comment_like(comment_id: int, identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    return ToggleResult(active=unwrap(edges.toggle_like(db, identity, LikeTarget.comment, comment_id)))


@router.post("/toggle/t/{tweet_id}", response_model=ToggleResult)
def toggle_tweet_like(tweet_id: int, identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    return ToggleResult(active=unwrap(edges.toggle_like(db, identity, LikeTarget.tweet, tweet_id)))


@router.get("/videos", response_model=list[VideoSummary])
def get_liked_videos(identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    return unwrap(aggregation.liked_videos(SQLStore(db), identity.id))
