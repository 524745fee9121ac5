from __future__ import annotations

from flask import Blueprint, request, g

from api.errors import Conflict, NotFound
from api.responses import api_response
from api.utils.params import ensure_owner, ensure_valid_id, visible_video_or_404
from models.repositories import playlists, users
from models.schemas.playlist import PlaylistCreateSchema, PlaylistUpdateSchema, PlaylistOutSchema
from models.schemas.video import VideoOutSchema
from utils.decorators import jwt_required

bp = Blueprint("playlists", __name__, url_prefix="/playlist")

playlist_create_schema = PlaylistCreateSchema()
playlist_update_schema = PlaylistUpdateSchema()
playlist_out_schema = PlaylistOutSchema()
playlist_videos_schema = VideoOutSchema(many=True, exclude=("owner",))


def _get_playlist_or_404(playlist_id: str):
    ensure_valid_id(playlist_id, "Playlist")
    playlist = playlists.find_by_id(playlist_id)
    if not playlist:
        raise NotFound("Playlist not found")
    return playlist


def _dump_playlist(playlist):
    """Playlist body with only the videos the current user is allowed to see."""
    visible = [v for v in playlist.videos if v.is_visible_to(g.current_user.id)]
    payload = playlist_out_schema.dump(playlist)
    payload["videos"] = playlist_videos_schema.dump(visible)
    payload["totalVideos"] = len(visible)
    return payload


@bp.post("/")
@jwt_required()
def create_playlist():
    """
    Create a playlist
    ---
    tags:
      - Playlists
    security:
      - Bearer: []
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [name, description]
           properties:
             name: { type: string }
             description: { type: string }
    responses:
      201: { description: Created }
      400: { description: Validation error }
    """
    data = playlist_create_schema.load(request.get_json(silent=True) or {})
    playlist = playlists.create(
        name=data["name"].strip(),
        description=data["description"].strip(),
        owner_id=g.current_user.id,
    )
    return api_response(_dump_playlist(playlist), "Playlist created successfully", 201)


@bp.get("/user/<user_id>")
@jwt_required()
def user_playlists(user_id: str):
    """
    Playlists owned by a user
    ---
    tags:
      - Playlists
    security:
      - Bearer: []
    parameters:
      - { in: path, name: user_id, type: string, required: true }
    responses:
      200: { description: OK }
      404: { description: User not found }
    """
    ensure_valid_id(user_id, "User")
    if not users.exists(user_id):
        raise NotFound("User not found")
    return api_response(
        [_dump_playlist(p) for p in playlists.for_owner(user_id)],
        "User playlists fetched successfully",
    )


@bp.get("/<playlist_id>")
@jwt_required()
def get_playlist(playlist_id: str):
    """
    Playlist with its videos in the order they were added
    ---
    tags:
      - Playlists
    security:
      - Bearer: []
    parameters:
      - { in: path, name: playlist_id, type: string, required: true }
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    playlist = _get_playlist_or_404(playlist_id)
    return api_response(_dump_playlist(playlist), "Playlist fetched successfully")


@bp.patch("/<playlist_id>")
@jwt_required()
def update_playlist(playlist_id: str):
    """
    Rename or re-describe a playlist (owner only)
    ---
    tags:
      - Playlists
    security:
      - Bearer: []
    parameters:
      - { in: path, name: playlist_id, type: string, required: true }
      -  in: body
         name: body
         schema:
           type: object
           properties:
             name: { type: string }
             description: { type: string }
    responses:
      200: { description: Updated }
      403: { description: Not the owner }
      404: { description: Not found }
    """
    playlist = _get_playlist_or_404(playlist_id)
    data = playlist_update_schema.load(request.get_json(silent=True) or {})
    ensure_owner(playlist.owner_id, "update this playlist")
    playlist = playlists.update_by_id(
        playlist.id, **{key: value.strip() for key, value in data.items()}
    )
    return api_response(_dump_playlist(playlist), "Playlist updated successfully")


@bp.delete("/<playlist_id>")
@jwt_required()
def delete_playlist(playlist_id: str):
    """
    Delete a playlist (owner only)
    ---
    tags:
      - Playlists
    security:
      - Bearer: []
    responses:
      200: { description: Deleted }
      403: { description: Not the owner }
      404: { description: Not found }
    """
    playlist = _get_playlist_or_404(playlist_id)
    ensure_owner(playlist.owner_id, "delete this playlist")
    playlists.delete_by_id(playlist.id)
    return api_response({}, "Playlist deleted successfully")


@bp.patch("/add/<video_id>/<playlist_id>")
@jwt_required()
def add_video_to_playlist(video_id: str, playlist_id: str):
    """
    Append a video to a playlist (owner only)
    ---
    tags:
      - Playlists
    security:
      - Bearer: []
    parameters:
      - { in: path, name: video_id, type: string, required: true }
      - { in: path, name: playlist_id, type: string, required: true }
    responses:
      200: { description: Added }
      403: { description: Not the owner }
      404: { description: Playlist or video not found }
      409: { description: Video already in playlist }
    """
    ensure_valid_id(video_id, "Video")
    playlist = _get_playlist_or_404(playlist_id)
    ensure_owner(playlist.owner_id, "add videos to this playlist")
    video = visible_video_or_404(video_id)
    if playlists.contains(playlist.id, video.id):
        raise Conflict("Video is already in the playlist")

    playlist.videos.append(video)
    playlists.save(playlist)
    return api_response(_dump_playlist(playlist), "Video added to playlist successfully")


@bp.patch("/remove/<video_id>/<playlist_id>")
@jwt_required()
def remove_video_from_playlist(video_id: str, playlist_id: str):
    """
    Remove a video from a playlist (owner only)
    ---
    tags:
      - Playlists
    security:
      - Bearer: []
    parameters:
      - { in: path, name: video_id, type: string, required: true }
      - { in: path, name: playlist_id, type: string, required: true }
    responses:
      200: { description: Removed }
      403: { description: Not the owner }
      404: { description: Playlist not found or video not in it }
    """
    ensure_valid_id(video_id, "Video")
    playlist = _get_playlist_or_404(playlist_id)
    ensure_owner(playlist.owner_id, "remove videos from this playlist")
    if not playlists.contains(playlist.id, video_id):
        raise NotFound("Video is not in the playlist")

    playlist.videos = [v for v in playlist.videos if v.id != video_id]
    playlists.save(playlist)
    return api_response(_dump_playlist(playlist), "Video removed from playlist successfully")
