# services/edges.py
import logging
from typing import Any, Optional, Type

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.result import Ok, Result, not_found, validation_error
from app.models.comment import Comment
from app.models.like import Like, LikeTarget
from app.models.subscription import Subscription
from app.models.tweet import Tweet
from app.models.user import User
from app.models.video import Video
from app.schemas.user_schema import Identity

logger = logging.getLogger(__name__)

LIKE_TARGET_MODELS = {
    LikeTarget.video: Video,
    LikeTarget.comment: Comment,
    LikeTarget.tweet: Tweet,
}


def _find_edge(db: Session, model: Type[Any], key: dict) -> Optional[Any]:
    return db.query(model).filter_by(**key).first()


def _edge_present(db: Session, model: Type[Any], key: dict) -> bool:
    return db.query(db.query(model).filter_by(**key).exists()).scalar()


def toggle_edge(db: Session, model: Type[Any], **key: Any) -> Result[bool]:
    """
    Delete the edge identified by ``key`` if it exists, otherwise create it.

    Returns whether the edge exists afterwards. The find-then-write pair is
    not atomic; the table's unique constraint is what keeps a racing
    duplicate out. Losing that race means the other request already created
    the edge, so the result is "exists" and nothing else is written. Any
    other integrity failure (an endpoint deleted in the meantime) propagates.
    """
    existing = _find_edge(db, model, key)
    if existing is not None:
        db.delete(existing)
        db.commit()
        return Ok(False)

    db.add(model(**key))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if not _edge_present(db, model, key):
            raise
        logger.info("Concurrent toggle on %s %s; edge already present", model.__tablename__, key)
    return Ok(True)


def toggle_subscription(db: Session, identity: Identity, channel_id: int) -> Result[bool]:
    # a channel subscribing to itself would inflate its own counts
    if channel_id == identity.id:
        return validation_error("You cannot subscribe to your own channel")
    if db.get(User, channel_id) is None:
        return not_found("Channel not found")
    return toggle_edge(db, Subscription, subscriber_id=identity.id, channel_id=channel_id)


def toggle_like(db: Session, identity: Identity, kind: LikeTarget, target_id: int) -> Result[bool]:
    target = db.get(LIKE_TARGET_MODELS[kind], target_id)
    missing = target is None
    if kind is LikeTarget.video and not missing:
        # someone else's draft does not exist as far as the caller can tell
        missing = not target.is_published and target.owner_id != identity.id
    if missing:
        return not_found(f"{kind.value.capitalize()} not found")
    return toggle_edge(db, Like, actor_id=identity.id, target_kind=kind, target_id=target_id)
