from flask import Blueprint, g

from api.responses import api_response
from models.repositories import videos
from models.schemas.video import VideoOutSchema
from utils.decorators import jwt_required

bp = Blueprint("dashboard", __name__, url_prefix="/dashboard")

video_out_schema = VideoOutSchema(exclude=("owner",))


@bp.get("/stats")
@jwt_required()
def channel_stats():
    """
    Totals for the current user's channel
    ---
    tags:
      - Dashboard
    security:
      - Bearer: []
    responses:
      200:
        description: OK
        schema:
          type: object
          properties:
            totalSubscribers: { type: integer }
            totalVideos: { type: integer }
            totalViews: { type: integer }
            totalLikes: { type: integer }
            totalComments: { type: integer }
            highestViewedVideo: { type: object }
    """
    stats = videos.channel_stats(g.current_user.id)
    highest = stats["highest_viewed_video"]
    return api_response(
        {
            "totalSubscribers": stats["total_subscribers"],
            "totalVideos": stats["total_videos"],
            "totalViews": stats["total_views"],
            "totalLikes": stats["total_likes"],
            "totalComments": stats["total_comments"],
            "highestViewedVideo": video_out_schema.dump(highest) if highest else None,
        },
        "Channel stats fetched successfully",
    )


@bp.get("/videos")
@jwt_required()
def channel_videos():
    """
    Every video of the current user's channel, published or not
    ---
    tags:
      - Dashboard
    security:
      - Bearer: []
    responses:
      200: { description: OK }
    """
    items = []
    for video, like_count, comment_count in videos.channel_videos(g.current_user.id):
        item = video_out_schema.dump(video)
        item["totalLikes"] = like_count or 0
        item["totalComments"] = comment_count or 0
        items.append(item)
    return api_response({"totalVideos": len(items), "videos": items}, "Channel videos fetched successfully")
