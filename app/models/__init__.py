from app.models.user import User
from app.models.watch_history import WatchHistoryEntry
from app.models.video import Video
from app.models.subscription import Subscription
from app.models.like import Like, LikeTarget
from app.models.playlist import Playlist, PlaylistVideo
from app.models.comment import Comment
from app.models.tweet import Tweet

__all__ = [
    "User",
    "WatchHistoryEntry",
    "Video",
    "Subscription",
    "Like",
    "LikeTarget",
    "Playlist",
    "PlaylistVideo",
    "Comment",
    "Tweet",
]
