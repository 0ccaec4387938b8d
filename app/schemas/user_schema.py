# schemas/user_schema.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    full_name: str
    avatar: str
    cover_image: str = ""
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class Identity(BaseModel):
    """The authenticated caller, without password hash or token fingerprint."""

    id: int
    username: str
    email: str
    full_name: str
    avatar: str
    cover_image: str = ""

    model_config = {"from_attributes": True, "frozen": True}


class OwnerSummary(BaseModel):
    id: int
    username: str
    full_name: str
    avatar: str

    model_config = {"from_attributes": True}


class LoginRequest(BaseModel):
    email: Optional[str] = None
    username: Optional[str] = None
    password: str


class AuthResponse(BaseModel):
    user: UserResponse
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class TokenPairResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshRequest(BaseModel):
    refresh_token: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    old_password: str
    new_password: str


class UpdateAccountRequest(BaseModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    username: Optional[str] = None


class ChannelProfile(BaseModel):
    id: int
    username: str
    email: str
    full_name: str
    avatar: str
    cover_image: str = ""
    subscriber_count: int
    subscription_count: int
    is_subscribed: bool
