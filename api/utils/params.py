from __future__ import annotations

from typing import Tuple

from flask import g, request

from api.errors import Forbidden, NotFound, RequestValidationError
from models.repositories import videos
from models.schemas.common import is_valid_id

MAX_LIMIT = 100


def parse_pagination(default_limit: int = 10) -> Tuple[int, int]:
    try:
        page = int(request.args.get("page", "1"))
        limit = int(request.args.get("limit", str(default_limit)))
    except ValueError:
        raise RequestValidationError("page and limit must be integers")
    page = max(page, 1)
    limit = max(1, min(limit, MAX_LIMIT))
    return page, limit


def ensure_valid_id(value: str, label: str) -> str:
    """Reject identifiers that are not well-formed before touching the database."""
    if not is_valid_id(value):
        raise RequestValidationError(f"Invalid {label} ID", errors=[f"{label} ID must be a UUID"])
    return value


def ensure_owner(owner_id: str, action: str) -> None:
    if owner_id != g.current_user.id:
        raise Forbidden(f"You cannot {action} as you are not its owner")


def visible_video_or_404(video_id: str):
    """Load a video the current user may see; unpublished videos of others read as missing."""
    ensure_valid_id(video_id, "Video")
    video = videos.find_by_id(video_id)
    if video is None or not video.is_visible_to(g.current_user.id):
        raise NotFound("Video not found")
    return video
