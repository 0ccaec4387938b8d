import enum

from sqlalchemy import Column, DateTime, Enum as SAEnum, ForeignKey, Integer, UniqueConstraint, func

from app.database import Base


class LikeTarget(str, enum.Enum):
    video = "video"
    comment = "comment"
    tweet = "tweet"


class Like(Base):
    """
    One table for all liked things, discriminated by target_kind.

    target_id is deliberately not a foreign key: the target may be deleted
    while the like survives, and readers drop such likes.
    """

    __tablename__ = "likes"

    id = Column(Integer, primary_key=True, index=True)
    actor_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    target_kind = Column(SAEnum(LikeTarget, name="like_target"), nullable=False)
    target_id = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    __table_args__ = (UniqueConstraint("actor_id", "target_kind", "target_id", name="_actor_target_uc"),)
