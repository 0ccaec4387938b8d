from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.auth.gate import get_current_identity
from app.database import get_db
from app.models.playlist import Playlist, PlaylistVideo
from app.models.user import User
from app.models.video import Video
from app.routers.ownership import fetch_owned, require_text
from app.schemas.playlist_schema import PlaylistCreate, PlaylistOut, PlaylistUpdate
from app.schemas.user_schema import Identity

router = APIRouter(prefix="/api/playlists", tags=["Playlists"])


@router.post("/", response_model=PlaylistOut, status_code=status.HTTP_201_CREATED)
def create_playlist(payload: PlaylistCreate, identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    require_text(name=payload.name)
    playlist = Playlist(owner_id=identity.id, name=payload.name.strip(), description=(payload.description or "").strip())
    db.add(playlist)
    db.commit()
    db.refresh(playlist)
    return playlist


@router.get("/user/{user_id}", response_model=list[PlaylistOut])
def get_user_playlists(user_id: int, db: Session = Depends(get_db)):
    if not db.get(User, user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return db.query(Playlist).filter(Playlist.owner_id == user_id).order_by(Playlist.id).all()


@router.get("/{playlist_id}", response_model=PlaylistOut)
def get_playlist_by_id(playlist_id: int, db: Session = Depends(get_db)):
    playlist = db.get(Playlist, playlist_id)
    if not playlist:
        raise HTTPException(status_code=404, detail="Playlist not found")
    return playlist


@router.patch("/add/{video_id}/{playlist_id}", response_model=PlaylistOut)
def add_video_to_playlist(
    video_id: int,
    playlist_id: int,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    if not db.get(Video, video_id):
        raise HTTPException(status_code=404, detail="Video not found")
    playlist = fetch_owned(db, Playlist, playlist_id, identity, "Playlist")

    db.add(PlaylistVideo(playlist_id=playlist.id, video_id=video_id))
    db.commit()
    db.refresh(playlist)
    return playlist


@router.patch("/remove/{video_id}/{playlist_id}", response_model=PlaylistOut)
def remove_video_from_playlist(
    video_id: int,
    playlist_id: int,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    playlist = fetch_owned(db, Playlist, playlist_id, identity, "Playlist")

    # removes every occurrence, duplicates included
    removed = (
        db.query(PlaylistVideo)
        .filter(PlaylistVideo.playlist_id == playlist.id, PlaylistVideo.video_id == video_id)
        .delete(synchronize_session=False)
    )
    if not removed:
        raise HTTPException(status_code=404, detail="Video is not in this playlist")
    db.commit()
    db.expire(playlist)
    return playlist


@router.patch("/{playlist_id}", response_model=PlaylistOut)
def update_playlist(
    playlist_id: int,
    payload: PlaylistUpdate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    if not (payload.name or "").strip() and not (payload.description or "").strip():
        raise HTTPException(status_code=400, detail="At least one field is required")

    playlist = fetch_owned(db, Playlist, playlist_id, identity, "Playlist")
    if (payload.name or "").strip():
        playlist.name = payload.name.strip()
    if (payload.description or "").strip():
        playlist.description = payload.description.strip()
    db.commit()
    db.refresh(playlist)
    return playlist


@router.delete("/{playlist_id}")
def delete_playlist(playlist_id: int, identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    playlist = fetch_owned(db, Playlist, playlist_id, identity, "Playlist")
    db.delete(playlist)
    db.commit()
    return {"message": "Playlist deleted successfully"}
