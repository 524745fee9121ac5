from __future__ import annotations

from flask import Blueprint, request, g

from api.errors import NotFound
from api.responses import api_response
from api.utils.params import ensure_owner, ensure_valid_id, parse_pagination, visible_video_or_404
from models.repositories import comments
from models.schemas.comment import CommentSchema, CommentOutSchema
from utils.decorators import jwt_required

bp = Blueprint("comments", __name__, url_prefix="/comments")

comment_schema = CommentSchema()
comment_out_schema = CommentOutSchema()


def _get_comment_or_404(comment_id: str):
    ensure_valid_id(comment_id, "Comment")
    comment = comments.find_by_id(comment_id)
    if not comment:
        raise NotFound("Comment not found")
    return comment


@bp.get("/<video_id>")
@jwt_required()
def list_comments(video_id: str):
    """
    Comments on a video, newest first
    ---
    tags:
      - Comments
    security:
      - Bearer: []
    parameters:
      - { in: path, name: video_id, type: string, required: true }
      - { in: query, name: page, type: integer, default: 1 }
      - { in: query, name: limit, type: integer, default: 10 }
    responses:
      200:
        description: Paginated comments, each with totalLikes
      404:
        description: Video not found
    """
    visible_video_or_404(video_id)
    page, limit = parse_pagination()
    rows, total = comments.for_video(video_id, page, limit)

    items = []
    for comment, like_count in rows:
        item = comment_out_schema.dump(comment)
        item["totalLikes"] = like_count or 0
        items.append(item)
    return api_response(
        {"comments": items, "page": page, "limit": limit, "totalComments": total},
        "Comments fetched successfully",
    )


@bp.post("/<video_id>")
@jwt_required()
def add_comment(video_id: str):
    """
    Comment on a video
    ---
    tags:
      - Comments
    security:
      - Bearer: []
    parameters:
      - { in: path, name: video_id, type: string, required: true }
      -  in: body
         name: body
         schema:
           type: object
           required: [content]
           properties:
             content: { type: string }
    responses:
      201: { description: Created }
      404: { description: Video not found }
    """
    visible_video_or_404(video_id)
    data = comment_schema.load(request.get_json(silent=True) or {})
    comment = comments.create(
        content=data["content"].strip(),
        video_id=video_id,
        owner_id=g.current_user.id,
    )
    return api_response(comment_out_schema.dump(comment), "Comment added successfully", 201)


@bp.patch("/c/<comment_id>")
@jwt_required()
def update_comment(comment_id: str):
    """
    Edit a comment (owner only)
    ---
    tags:
      - Comments
    security:
      - Bearer: []
    parameters:
      - { in: path, name: comment_id, type: string, required: true }
      -  in: body
         name: body
         schema:
           type: object
           properties:
             content: { type: string }
    responses:
      200: { description: Updated }
      403: { description: Not the owner }
      404: { description: Not found }
    """
    comment = _get_comment_or_404(comment_id)
    data = comment_schema.load(request.get_json(silent=True) or {})
    ensure_owner(comment.owner_id, "edit this comment")
    comment = comments.update_by_id(comment.id, content=data["content"].strip())
    return api_response(comment_out_schema.dump(comment), "Comment updated successfully")


@bp.delete("/c/<comment_id>")
@jwt_required()
def delete_comment(comment_id: str):
    """
    Delete a comment (owner only)
    ---
    tags:
      - Comments
    security:
      - Bearer: []
    responses:
      200: { description: Deleted }
      403: { description: Not the owner }
      404: { description: Not found }
    """
    comment = _get_comment_or_404(comment_id)
    ensure_owner(comment.owner_id, "delete this comment")
    comments.delete_by_id(comment.id)
    return api_response({}, "Comment deleted successfully")
