# Comments and tweets
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class ContentIn(BaseModel):
    content: str


class CommentOut(BaseModel):
    id: int
    owner_id: int
    video_id: int
    content: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TweetOut(BaseModel):
    id: int
    owner_id: int
    content: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ToggleResult(BaseModel):
    active: bool
