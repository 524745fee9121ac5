"""
Likes blueprint. A like points at exactly one video, comment or tweet;
posting to a toggle route creates the like or removes the existing one.
"""
from __future__ import annotations

from flask import Blueprint, g

from api.errors import NotFound
from api.responses import api_response
from api.utils.params import ensure_valid_id, visible_video_or_404
from models.repositories import comments, likes, tweets
from models.schemas.like import LikeOutSchema
from models.schemas.video import VideoOutSchema
from utils.decorators import jwt_required

bp = Blueprint("likes", __name__, url_prefix="/likes")

like_out_schema = LikeOutSchema()
video_out_schema = VideoOutSchema()


def _ensure_target(repository, target_id: str, label: str):
    ensure_valid_id(target_id, label)
    if not repository.exists(target_id):
        raise NotFound(f"{label} not found")


def _toggle(target_id: str, label: str, column: str):
    existing = likes.find_one(liked_by_id=g.current_user.id, **{column: target_id})
    if existing:
        likes.delete(existing)
        return api_response({"isLiked": False}, f"{label} unliked successfully")

    like = likes.create(liked_by_id=g.current_user.id, **{column: target_id})
    payload = like_out_schema.dump(like)
    payload["isLiked"] = True
    return api_response(payload, f"{label} liked successfully", 201)


@bp.post("/toggle/v/<video_id>")
@jwt_required()
def toggle_video_like(video_id: str):
    """
    Like or unlike a video
    ---
    tags:
      - Likes
    security:
      - Bearer: []
    parameters:
      - { in: path, name: video_id, type: string, required: true }
    responses:
      201: { description: Liked }
      200: { description: Unliked }
      404: { description: Video not found }
    """
    visible_video_or_404(video_id)
    return _toggle(video_id, "Video", "video_id")


@bp.post("/toggle/c/<comment_id>")
@jwt_required()
def toggle_comment_like(comment_id: str):
    """
    Like or unlike a comment
    ---
    tags:
      - Likes
    security:
      - Bearer: []
    parameters:
      - { in: path, name: comment_id, type: string, required: true }
    responses:
      201: { description: Liked }
      200: { description: Unliked }
      404: { description: Comment not found }
    """
    _ensure_target(comments, comment_id, "Comment")
    return _toggle(comment_id, "Comment", "comment_id")


@bp.post("/toggle/t/<tweet_id>")
@jwt_required()
def toggle_tweet_like(tweet_id: str):
    """
    Like or unlike a tweet
    ---
    tags:
      - Likes
    security:
      - Bearer: []
    parameters:
      - { in: path, name: tweet_id, type: string, required: true }
    responses:
      201: { description: Liked }
      200: { description: Unliked }
      404: { description: Tweet not found }
    """
    _ensure_target(tweets, tweet_id, "Tweet")
    return _toggle(tweet_id, "Tweet", "tweet_id")


@bp.get("/videos")
@jwt_required()
def liked_videos():
    """
    Videos liked by the current user, most recent like first
    ---
    tags:
      - Likes
    security:
      - Bearer: []
    responses:
      200: { description: OK }
    """
    rows = likes.liked_videos(g.current_user.id)
    items = []
    for like, video in rows:
        item = video_out_schema.dump(video)
        item["likedAt"] = like_out_schema.dump(like)["createdAt"]
        items.append(item)
    return api_response({"likedVideos": items, "totalVideos": len(items)}, "Liked videos fetched successfully")
