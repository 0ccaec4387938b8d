from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from app.schemas.user_schema import OwnerSummary


class VideoOut(BaseModel):
    id: int
    owner_id: int
    title: str
    description: str
    video_file: str
    thumbnail: str
    duration: float
    views: int
    is_published: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class VideoSummary(BaseModel):
    id: int
    owner_id: int
    title: str
    thumbnail: str
    duration: float
    views: int

    model_config = {"from_attributes": True}


class WatchHistoryItem(VideoSummary):
    owner: OwnerSummary


class VideoUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
