from __future__ import annotations

import math
from typing import Any, Dict

from flask import Blueprint, request, g

from api.errors import RequestValidationError
from api.responses import api_response
from api.utils.params import ensure_owner, visible_video_or_404
from models.repositories import users, videos
from models.schemas.video import (
    VideoCreateSchema,
    VideoUpdateSchema,
    VideoOutSchema,
    VideoListQuerySchema,
)
from utils.decorators import jwt_required
from utils.media import save_upload, delete_media

bp = Blueprint("videos", __name__, url_prefix="/videos")

video_create_schema = VideoCreateSchema()
video_update_schema = VideoUpdateSchema()
video_out_schema = VideoOutSchema()
videos_out_schema = VideoOutSchema(many=True)
list_query_schema = VideoListQuerySchema()


def _pagination(page: int, limit: int, total: int) -> Dict[str, Any]:
    total_page = max(1, math.ceil(total / limit))
    return {
        "page": page,
        "limit": limit,
        "first": page == 1,
        "last": page >= total_page,
        "prev": page - 1 if page > 1 else None,
        "next": page + 1 if page < total_page else None,
        "totalPage": total_page,
        "totalVideos": total,
    }


@bp.get("/")
@jwt_required()
def list_videos():
    """
    List published videos with search, sorting and pagination
    ---
    tags:
      - Videos
    security:
      - Bearer: []
    parameters:
      - { in: query, name: page, type: integer, default: 1 }
      - { in: query, name: limit, type: integer, default: 10 }
      - { in: query, name: query, type: string, description: "Case-insensitive title search" }
      - { in: query, name: sortBy, type: string, enum: [createdAt, views, duration, title], default: createdAt }
      - { in: query, name: sortType, type: string, enum: [asc, desc], default: desc }
      - { in: query, name: userId, type: string, description: "Only videos of this owner" }
    responses:
      200:
        description: Paginated list
      400:
        description: Invalid query parameter
    """
    params = list_query_schema.load(request.args.to_dict())
    rows, total = videos.search(
        page=params["page"],
        limit=params["limit"],
        query=params["query"],
        sort_by=params["sort_by"],
        descending=params["sort_type"] == "desc",
        owner_id=params["user_id"],
    )
    return api_response(
        {
            "videos": videos_out_schema.dump(rows),
            "pagination": _pagination(params["page"], params["limit"], total),
        },
        "Videos fetched successfully",
    )


@bp.post("/")
@jwt_required()
def publish_video():
    """
    Upload and publish a video
    ---
    tags:
      - Videos
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
    parameters:
      - { in: formData, name: title, type: string, required: true }
      - { in: formData, name: description, type: string, required: true }
      - { in: formData, name: duration, type: number, required: false }
      - { in: formData, name: videoFile, type: file, required: true }
      - { in: formData, name: thumbnail, type: file, required: true }
    responses:
      201:
        description: Created
      400:
        description: Validation error or missing files
    """
    data = video_create_schema.load(request.form.to_dict())

    video_upload = request.files.get("videoFile")
    thumbnail_upload = request.files.get("thumbnail")
    if video_upload is None or not video_upload.filename:
        raise RequestValidationError("Video file is required")
    if thumbnail_upload is None or not thumbnail_upload.filename:
        raise RequestValidationError("Thumbnail is required")

    video = videos.create(
        title=data["title"].strip(),
        description=data["description"].strip(),
        duration=data["duration"],
        video_file=save_upload(video_upload, "videos"),
        thumbnail=save_upload(thumbnail_upload, "thumbnails"),
        owner_id=g.current_user.id,
        is_published=True,
    )
    return api_response(video_out_schema.dump(video), "Video published successfully", 201)


@bp.get("/<video_id>")
@jwt_required()
def get_video(video_id: str):
    """
    Get a video with its likes and similar videos.
    Opening a video counts a view and records it in the viewer's watch history.
    ---
    tags:
      - Videos
    security:
      - Bearer: []
    parameters:
      - { in: path, name: video_id, type: string, required: true }
    responses:
      200:
        description: OK
      400:
        description: Invalid Video ID
      404:
        description: Not found
    """
    video = visible_video_or_404(video_id)
    viewer_id = g.current_user.id

    users.add_to_watch_history(viewer_id, video.id)
    videos.increment_views(video.id)

    video = videos.find_by_id(video.id)
    likers = videos.likers(video.id)
    payload = video_out_schema.dump(video)
    payload.update(
        {
            "totalLikes": len(likers),
            "likers": likers,
            "isLiked": viewer_id in likers,
            "similarVideos": videos_out_schema.dump(videos.similar(video)),
        }
    )
    return api_response(payload, "Video fetched successfully")


@bp.patch("/<video_id>")
@jwt_required()
def update_video(video_id: str):
    """
    Update title, description or thumbnail (owner only)
    ---
    tags:
      - Videos
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
    parameters:
      - { in: path, name: video_id, type: string, required: true }
      - { in: formData, name: title, type: string, required: false }
      - { in: formData, name: description, type: string, required: false }
      - { in: formData, name: thumbnail, type: file, required: false }
    responses:
      200: { description: Updated }
      400: { description: Nothing to update or invalid input }
      403: { description: Not the owner }
      404: { description: Not found }
    """
    video = visible_video_or_404(video_id)
    ensure_owner(video.owner_id, "edit this video")

    fields_in = request.form.to_dict() or (request.get_json(silent=True) or {})
    data = video_update_schema.load(fields_in)
    thumbnail_upload = request.files.get("thumbnail")
    has_thumbnail = thumbnail_upload is not None and bool(thumbnail_upload.filename)
    if not data and not has_thumbnail:
        raise RequestValidationError("Provide a title, description or thumbnail to update")

    old_thumbnail = None
    if "title" in data:
        video.title = data["title"].strip()
    if "description" in data:
        video.description = data["description"].strip()
    if has_thumbnail:
        old_thumbnail = video.thumbnail
        video.thumbnail = save_upload(thumbnail_upload, "thumbnails")

    videos.save(video)
    if old_thumbnail:
        delete_media(old_thumbnail)
    return api_response(video_out_schema.dump(video), "Video updated successfully")


@bp.delete("/<video_id>")
@jwt_required()
def delete_video(video_id: str):
    """
    Delete a video and its media (owner only)
    ---
    tags:
      - Videos
    security:
      - Bearer: []
    parameters:
      - { in: path, name: video_id, type: string, required: true }
    responses:
      200: { description: Deleted }
      403: { description: Not the owner }
      404: { description: Not found }
    """
    video = visible_video_or_404(video_id)
    ensure_owner(video.owner_id, "delete this video")

    media = (video.video_file, video.thumbnail)
    videos.delete(video)
    for url in media:
        delete_media(url)
    return api_response({}, "Video deleted successfully")


@bp.patch("/toggle/publish/<video_id>")
@jwt_required()
def toggle_publish_status(video_id: str):
    """
    Flip the published flag (owner only)
    ---
    tags:
      - Videos
    security:
      - Bearer: []
    parameters:
      - { in: path, name: video_id, type: string, required: true }
    responses:
      200: { description: Toggled }
      403: { description: Not the owner }
      404: { description: Not found }
    """
    video = visible_video_or_404(video_id)
    ensure_owner(video.owner_id, "change the publish status of this video")
    video.is_published = not video.is_published
    videos.save(video)
    return api_response(
        {"id": video.id, "isPublished": video.is_published},
        "Video publish status toggled successfully",
    )
