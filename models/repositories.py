"""
Per-entity repositories over DBStorage.

Each repository exposes the same narrow surface (find_by_id, find_one, find,
create, update_by_id, delete_by_id) plus the few named aggregate queries the
handlers need. Joins, counts and pagination are expressed as SQL and run by
the database.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.orm import defer, joinedload

import models
from models.comment import Comment
from models.like import Like
from models.playlist import Playlist, playlist_videos
from models.subscription import Subscription
from models.tweet import Tweet
from models.user import User, watch_history
from models.video import Video
from models.base_model import utcnow


class Repository:
    model = None

    @property
    def session(self):
        return models.storage.get_session()

    def query(self):
        return self.session.query(self.model)

    def find_by_id(self, obj_id: str):
        if not obj_id:
            return None
        return self.session.get(self.model, obj_id)

    def exists(self, obj_id: str) -> bool:
        return self.find_by_id(obj_id) is not None

    def find_one(self, **filters):
        return self.query().filter_by(**filters).first()

    def create(self, **fields):
        obj = self.model(**fields)
        models.storage.new(obj)
        models.storage.save()
        return obj

    def save(self, obj):
        models.storage.new(obj)
        models.storage.save()
        return obj

    def update_by_id(self, obj_id: str, **fields):
        obj = self.find_by_id(obj_id)
        if obj is None:
            return None
        for key, value in fields.items():
            setattr(obj, key, value)
        return self.save(obj)

    def delete(self, obj):
        models.storage.delete(obj)
        models.storage.save()
        return obj

    def delete_by_id(self, obj_id: str):
        obj = self.find_by_id(obj_id)
        if obj is None:
            return None
        return self.delete(obj)


def _like_count(target_column, model):
    """Correlated COUNT(*) of likes whose `target_column` points at `model`."""
    return (
        select(func.count(Like.id))
        .where(target_column == model.id)
        .correlate(model)
        .scalar_subquery()
    )


def _like_pattern(text: str) -> str:
    """Substring pattern for LIKE with the user text taken literally (escape char is a backslash)."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _visible_to(user_id: str):
    return or_(Video.is_published.is_(True), Video.owner_id == user_id)


def _comment_count():
    return (
        select(func.count(Comment.id))
        .where(Comment.video_id == Video.id)
        .correlate(Video)
        .scalar_subquery()
    )


class UserRepository(Repository):
    model = User

    def find_principal(self, user_id: str):
        """Load a user for request context; secrets are left unloaded."""
        if not user_id:
            return None
        return (
            self.query()
            .options(defer(User.password), defer(User.refresh_token))
            .filter(User.id == user_id)
            .first()
        )

    def find_by_login(self, username: Optional[str] = None, email: Optional[str] = None):
        clauses = []
        if username:
            clauses.append(User.username == username.strip().lower())
        if email:
            clauses.append(User.email == email.strip().lower())
        if not clauses:
            return None
        return self.query().filter(or_(*clauses)).first()

    def find_by_username(self, username: str):
        return self.query().filter(User.username == username.strip().lower()).first()

    def replace_refresh_token(self, user_id: str, expected: str, new_token: str) -> bool:
        """
        Compare-and-swap on the refresh token slot. Returns False when the
        stored token no longer equals `expected` (another refresh won).
        """
        result = self.session.execute(
            update(User)
            .where(User.id == user_id, User.refresh_token == expected)
            .values(refresh_token=new_token, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        models.storage.save()
        self.session.expire_all()
        return result.rowcount == 1

    def set_refresh_token(self, user_id: str, token: Optional[str]):
        self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(refresh_token=token, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        models.storage.save()
        self.session.expire_all()

    def channel_profile(self, username: str, viewer_id: str) -> Optional[Dict[str, Any]]:
        user = self.find_by_username(username)
        if user is None:
            return None
        subscribers_count = (
            self.session.query(func.count(Subscription.id))
            .filter(Subscription.channel_id == user.id)
            .scalar()
        )
        subscribed_to_count = (
            self.session.query(func.count(Subscription.id))
            .filter(Subscription.subscriber_id == user.id)
            .scalar()
        )
        is_subscribed = (
            self.session.query(Subscription.id)
            .filter(Subscription.channel_id == user.id, Subscription.subscriber_id == viewer_id)
            .first()
            is not None
        )
        return {
            "user": user,
            "subscribers_count": subscribers_count or 0,
            "channels_subscribed_to_count": subscribed_to_count or 0,
            "is_subscribed": is_subscribed,
        }

    def add_to_watch_history(self, user_id: str, video_id: str):
        updated = self.session.execute(
            watch_history.update()
            .where(and_(watch_history.c.user_id == user_id, watch_history.c.video_id == video_id))
            .values(watched_at=utcnow())
        )
        if updated.rowcount == 0:
            self.session.execute(
                watch_history.insert().values(user_id=user_id, video_id=video_id, watched_at=utcnow())
            )
        models.storage.save()

    def watch_history(self, user_id: str) -> List[Video]:
        return (
            self.session.query(Video)
            .join(watch_history, watch_history.c.video_id == Video.id)
            .options(joinedload(Video.owner))
            .filter(watch_history.c.user_id == user_id, _visible_to(user_id))
            .order_by(watch_history.c.watched_at.desc())
            .all()
        )


VIDEO_SORT_COLUMNS = {
    "createdAt": Video.created_at,
    "views": Video.views,
    "duration": Video.duration,
    "title": Video.title,
}


class VideoRepository(Repository):
    model = Video

    def search(
        self,
        page: int,
        limit: int,
        query: Optional[str] = None,
        sort_by: str = "createdAt",
        descending: bool = True,
        owner_id: Optional[str] = None,
    ) -> Tuple[List[Video], int]:
        q = self.query().filter(Video.is_published.is_(True))
        if query:
            q = q.filter(Video.title.ilike(_like_pattern(query.strip()), escape="\\"))
        if owner_id:
            q = q.filter(Video.owner_id == owner_id)
        total = q.count()
        column = VIDEO_SORT_COLUMNS[sort_by]
        rows = (
            q.options(joinedload(Video.owner))
            .order_by(column.desc() if descending else column.asc(), Video.id)
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return rows, total

    def likers(self, video_id: str) -> List[str]:
        rows = (
            self.session.query(Like.liked_by_id)
            .filter(Like.video_id == video_id)
            .order_by(Like.created_at)
            .all()
        )
        return [row[0] for row in rows]

    def similar(self, video: Video, limit: int = 5) -> List[Video]:
        words = [w for w in video.title.split() if w]
        if not words:
            return []
        return (
            self.query()
            .options(joinedload(Video.owner))
            .filter(Video.id != video.id, Video.is_published.is_(True))
            .filter(or_(*[Video.title.ilike(_like_pattern(w), escape="\\") for w in words]))
            .order_by(Video.views.desc())
            .limit(limit)
            .all()
        )

    def increment_views(self, video_id: str):
        self.session.execute(
            update(Video)
            .where(Video.id == video_id)
            .values(views=Video.views + 1)
            .execution_options(synchronize_session=False)
        )
        models.storage.save()
        self.session.expire_all()

    def channel_videos(self, owner_id: str) -> List[Tuple[Video, int, int]]:
        return (
            self.session.query(Video, _like_count(Like.video_id, Video), _comment_count())
            .filter(Video.owner_id == owner_id)
            .order_by(Video.created_at.desc())
            .all()
        )

    def channel_stats(self, owner_id: str) -> Dict[str, Any]:
        session = self.session
        total_subscribers = (
            session.query(func.count(Subscription.id)).filter(Subscription.channel_id == owner_id).scalar()
        )
        total_videos, total_views = (
            session.query(func.count(Video.id), func.coalesce(func.sum(Video.views), 0))
            .filter(Video.owner_id == owner_id)
            .one()
        )
        total_likes = (
            session.query(func.count(Like.id))
            .join(Video, Like.video_id == Video.id)
            .filter(Video.owner_id == owner_id)
            .scalar()
        )
        total_comments = (
            session.query(func.count(Comment.id))
            .join(Video, Comment.video_id == Video.id)
            .filter(Video.owner_id == owner_id)
            .scalar()
        )
        highest = (
            self.query()
            .filter(Video.owner_id == owner_id)
            .order_by(Video.views.desc(), Video.created_at.asc())
            .first()
        )
        return {
            "total_subscribers": total_subscribers or 0,
            "total_videos": total_videos or 0,
            "total_views": int(total_views or 0),
            "total_likes": total_likes or 0,
            "total_comments": total_comments or 0,
            "highest_viewed_video": highest,
        }


class CommentRepository(Repository):
    model = Comment

    def for_video(self, video_id: str, page: int, limit: int) -> Tuple[List[Tuple[Comment, int]], int]:
        base = self.query().filter(Comment.video_id == video_id)
        total = base.count()
        rows = (
            self.session.query(Comment, _like_count(Like.comment_id, Comment))
            .options(joinedload(Comment.owner))
            .filter(Comment.video_id == video_id)
            .order_by(Comment.created_at.desc(), Comment.id)
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return rows, total


class LikeRepository(Repository):
    model = Like

    def liked_videos(self, user_id: str) -> List[Tuple[Like, Video]]:
        return (
            self.session.query(Like, Video)
            .join(Video, Like.video_id == Video.id)
            .options(joinedload(Video.owner))
            .filter(Like.liked_by_id == user_id, _visible_to(user_id))
            .order_by(Like.created_at.desc())
            .all()
        )


class SubscriptionRepository(Repository):
    model = Subscription

    def subscribers(self, channel_id: str) -> List[User]:
        return (
            self.session.query(User)
            .join(Subscription, Subscription.subscriber_id == User.id)
            .filter(Subscription.channel_id == channel_id)
            .order_by(Subscription.created_at.desc())
            .all()
        )

    def subscribed_channels(self, subscriber_id: str) -> List[User]:
        return (
            self.session.query(User)
            .join(Subscription, Subscription.channel_id == User.id)
            .filter(Subscription.subscriber_id == subscriber_id)
            .order_by(Subscription.created_at.desc())
            .all()
        )


class PlaylistRepository(Repository):
    model = Playlist

    def for_owner(self, owner_id: str) -> List[Playlist]:
        return (
            self.query()
            .options(joinedload(Playlist.videos))
            .filter(Playlist.owner_id == owner_id)
            .order_by(Playlist.created_at.desc())
            .all()
        )

    def contains(self, playlist_id: str, video_id: str) -> bool:
        row = self.session.execute(
            select(playlist_videos.c.video_id).where(
                playlist_videos.c.playlist_id == playlist_id,
                playlist_videos.c.video_id == video_id,
            )
        ).first()
        return row is not None


class TweetRepository(Repository):
    model = Tweet

    def for_owner(self, owner_id: str) -> List[Tuple[Tweet, int]]:
        return (
            self.session.query(Tweet, _like_count(Like.tweet_id, Tweet))
            .options(joinedload(Tweet.owner))
            .filter(Tweet.owner_id == owner_id)
            .order_by(Tweet.created_at.desc())
            .all()
        )


users = UserRepository()
videos = VideoRepository()
comments = CommentRepository()
likes = LikeRepository()
subscriptions = SubscriptionRepository()
playlists = PlaylistRepository()
tweets = TweetRepository()
