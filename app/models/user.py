# models/user.py
from sqlalchemy import Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from app.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(64), unique=True, index=True, nullable=False)   # stored lower-case
    email = Column(String(255), unique=True, index=True, nullable=False)     # stored lower-case
    full_name = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    refresh_token_fingerprint = Column(String(64), nullable=True)            # sha256 of the live refresh token
    avatar = Column(String(512), nullable=False)
    cover_image = Column(String(512), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    watch_history_entries = relationship(
        "WatchHistoryEntry",
        order_by="WatchHistoryEntry.id",
        cascade="all, delete-orphan",
    )

    @property
    def watch_history(self) -> list[int]:
        return [entry.video_id for entry in self.watch_history_entries]
