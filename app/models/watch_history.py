from sqlalchemy import Column, DateTime, ForeignKey, Integer, func

from app.database import Base


class WatchHistoryEntry(Base):
    """One view of a video by a user. The id orders the history; entries are never deduplicated."""

    __tablename__ = "watch_history"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    video_id = Column(Integer, nullable=False)  # no FK: survives video deletion
    watched_at = Column(DateTime(timezone=True), server_default=func.now())
