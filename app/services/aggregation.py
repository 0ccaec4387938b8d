"""
Derived social-graph views.

Everything here is read-only and built from four primitives over a
``Store``: resolve_by_id, resolve_by_set, project and count_edges. Edges
that point at something that no longer exists are dropped without error.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence, Type

from app.core.result import Ok, Result, not_found
from app.models.like import Like, LikeTarget
from app.models.subscription import Subscription
from app.models.user import User
from app.models.video import Video
from app.schemas.user_schema import Identity
from app.store import Store

PUBLIC_USER_FIELDS = ("id", "username", "email", "full_name", "avatar", "cover_image")
OWNER_FIELDS = ("id", "username", "full_name", "avatar")
VIDEO_SUMMARY_FIELDS = ("id", "owner_id", "title", "thumbnail", "duration", "views")


# ---------- Primitives ----------

def resolve_by_id(store: Store, model: Type[Any], ident: Optional[int]) -> Optional[Any]:
    if ident is None:
        return None
    return store.get(model, ident)


def resolve_by_set(store: Store, model: Type[Any], idents: Sequence[int]) -> List[Any]:
    """Entities for ``idents`` in input order; missing ids are skipped, repeats are kept."""
    found = store.get_many(model, idents)
    return [found[i] for i in idents if i in found]


def project(entity: Any, fields: Iterable[str]) -> Dict[str, Any]:
    return {field: getattr(entity, field) for field in fields}


def count_edges(store: Store, relation: Type[Any], **match: Any) -> int:
    return store.count(relation, **match)


# ---------- Views ----------

def channel_profile(store: Store, username: str, viewer: Optional[Identity]) -> Result[dict]:
    username = (username or "").strip().lower()
    channel = store.find_one(User, username=username)
    if channel is None:
        return not_found("Channel does not exist")

    is_subscribed = False
    if viewer is not None:
        is_subscribed = store.exists(Subscription, subscriber_id=viewer.id, channel_id=channel.id)

    profile = project(channel, PUBLIC_USER_FIELDS)
    profile.update(
        subscriber_count=count_edges(store, Subscription, channel_id=channel.id),
        subscription_count=count_edges(store, Subscription, subscriber_id=channel.id),
        is_subscribed=is_subscribed,
    )
    return Ok(profile)


def _visible_to(videos: List[Video], viewer_id: int) -> List[Video]:
    # drafts drop out like dangling references, except for their owner
    return [v for v in videos if v.is_published or v.owner_id == viewer_id]


def _with_owners(store: Store, videos: List[Video]) -> List[dict]:
    owners = store.get_many(User, [v.owner_id for v in videos])
    items = []
    for video in videos:
        owner = owners.get(video.owner_id)
        if owner is None:
            continue
        item = project(video, VIDEO_SUMMARY_FIELDS)
        item["owner"] = project(owner, OWNER_FIELDS)
        items.append(item)
    return items


def watch_history(store: Store, user_id: int) -> Result[List[dict]]:
    user = resolve_by_id(store, User, user_id)
    if user is None:
        return not_found("User not found")
    videos = _visible_to(resolve_by_set(store, Video, user.watch_history), user_id)
    return Ok(_with_owners(store, videos))


def subscribed_channels(store: Store, subscriber_id: int) -> Result[List[dict]]:
    if resolve_by_id(store, User, subscriber_id) is None:
        return not_found("Subscriber not found")
    channel_ids = store.edge_targets(Subscription, "channel_id", subscriber_id=subscriber_id)
    return Ok([project(c, OWNER_FIELDS) for c in resolve_by_set(store, User, channel_ids)])


def channel_subscribers(store: Store, channel_id: int) -> Result[List[dict]]:
    if resolve_by_id(store, User, channel_id) is None:
        return not_found("Channel not found")
    subscriber_ids = store.edge_targets(Subscription, "subscriber_id", channel_id=channel_id)
    return Ok([project(s, OWNER_FIELDS) for s in resolve_by_set(store, User, subscriber_ids)])


def liked_videos(store: Store, actor_id: int) -> Result[List[dict]]:
    video_ids = store.edge_targets(Like, "target_id", actor_id=actor_id, target_kind=LikeTarget.video)
    videos = _visible_to(resolve_by_set(store, Video, video_ids), actor_id)
    return Ok([project(v, VIDEO_SUMMARY_FIELDS) for v in videos])
