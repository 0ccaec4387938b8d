from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.auth.gate import get_current_identity
from app.database import get_db
from app.models.comment import Comment
from app.models.video import Video
from app.routers.ownership import fetch_owned, require_text
from app.schemas.content_schema import CommentOut, ContentIn
from app.schemas.user_schema import Identity

router = APIRouter(prefix="/api/comments", tags=["Comments"])


@router.get("/{video_id}", response_model=list[CommentOut])
def get_video_comments(video_id: int, db: Session = Depends(get_db)):
    if not db.get(Video, video_id):
        raise HTTPException(status_code=404, detail="Video not found")
    return db.query(Comment).filter(Comment.video_id == video_id).order_by(Comment.id).all()


@router.post("/{video_id}", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
def add_comment(video_id: int, payload: ContentIn, identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    require_text(content=payload.content)
    if not db.get(Video, video_id):
        raise HTTPException(status_code=404, detail="Video not found")

    comment = Comment(owner_id=identity.id, video_id=video_id, content=payload.content.strip())
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment


@router.patch("/c/{comment_id}", response_model=CommentOut)
def update_comment(comment_id: int, payload: ContentIn, identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    require_text(content=payload.content)
    comment = fetch_owned(db, Comment, comment_id, identity, "Comment")
    comment.content = payload.content.strip()
    db.commit()
    db.refresh(comment)
    return comment


@router.delete("/c/{comment_id}")
def delete_comment(comment_id: int, identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    comment = fetch_owned(db, Comment, comment_id, identity, "Comment")
    db.delete(comment)
    db.commit()
    return {"message": "Comment deleted successfully"}
