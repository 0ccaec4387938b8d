from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class PlaylistCreate(BaseModel):
    name: str
    description: str = ""


class PlaylistUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class PlaylistOut(BaseModel):
    id: int
    owner_id: int
    name: str
    description: str
    video_ids: List[int]
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
