"""
Users blueprint:
- POST  /users/register
- POST  /users/login
- POST  /users/logout
- POST  /users/refresh-token
- POST  /users/change-password
- GET   /users/current-user
- PATCH /users/update-account
- PATCH /users/avatar
- PATCH /users/cover-image
- GET   /users/c/<username>
- GET   /users/history

Passwords are hashed with argon2 when the user row is flushed, access and
refresh tokens are JWTs signed with separate secrets, and the refresh token
lives in a single slot on the user row so a rotated token cannot be reused.
"""
from __future__ import annotations

import logging

from flask import Blueprint, request, g, current_app
from sqlalchemy.exc import IntegrityError

from api.errors import Conflict, NotFound, RequestValidationError, Unauthenticated
from api.responses import api_response
from models.repositories import users
from models.schemas.user import (
    UserRegisterSchema,
    UserLoginSchema,
    ChangePasswordSchema,
    UpdateAccountSchema,
    RefreshTokenSchema,
    UserOutSchema,
    ChannelProfileSchema,
)
from models.schemas.video import VideoOutSchema
from utils.cookies import set_auth_cookies, clear_auth_cookies
from utils.decorators import jwt_required
from utils.media import save_upload, delete_media
from utils.security import verify_password
from utils.sessions import issue_session, rotate_session, revoke_session

logger = logging.getLogger(__name__)

bp = Blueprint("users", __name__, url_prefix="/users")

register_schema = UserRegisterSchema()
login_schema = UserLoginSchema()
change_password_schema = ChangePasswordSchema()
update_account_schema = UpdateAccountSchema()
refresh_schema = RefreshTokenSchema()
user_out_schema = UserOutSchema()
channel_profile_schema = ChannelProfileSchema()
history_out_schema = VideoOutSchema(many=True)


@bp.post("/register")
def register():
    """
    Register a new user.
    ---
    tags:
      - Users
    consumes:
      - multipart/form-data
    parameters:
      - { in: formData, name: username, type: string, required: true }
      - { in: formData, name: email, type: string, required: true }
      - { in: formData, name: password, type: string, required: true }
      - { in: formData, name: fullName, type: string, required: true }
      - { in: formData, name: avatar, type: file, required: true }
      - { in: formData, name: coverImage, type: file, required: false }
    responses:
      201:
        description: Created
      400:
        description: Validation error or missing avatar
      409:
        description: Username or email already taken
    """
    data = register_schema.load(request.form.to_dict())

    if users.find_by_login(username=data["username"], email=data["email"]):
        raise Conflict("User with email or username already exists")

    avatar_file = request.files.get("avatar")
    if avatar_file is None or not avatar_file.filename:
        raise RequestValidationError("Avatar file is required")

    avatar = save_upload(avatar_file, "avatars")
    cover_image = save_upload(request.files.get("coverImage"), "covers")

    try:
        user = users.create(
            username=data["username"],
            email=data["email"],
            full_name=data["full_name"],
            password=data["password"],
            avatar=avatar,
            cover_image=cover_image or "",
        )
    except IntegrityError:
        # lost a race on username/email; the files belong to no one
        delete_media(avatar)
        delete_media(cover_image)
        raise
    return api_response(user_out_schema.dump(user), "User registered successfully", 201)


@bp.post("/login")
def login():
    """
    Login with username or email; sets accessToken and refreshToken cookies.
    ---
    tags:
      - Users
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             username: { type: string }
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      401:
        description: Invalid credentials
      404:
        description: User does not exist
    """
    data = login_schema.load(request.get_json(silent=True) or {})
    if not data.get("username") and not data.get("email"):
        raise RequestValidationError("username or email is required")

    user = users.find_by_login(username=data.get("username"), email=data.get("email"))
    if not user:
        raise NotFound("User does not exist")
    if not verify_password(data["password"], user.password):
        logger.info("Failed login for user %s", user.id)
        raise Unauthenticated("Invalid user credentials")

    access_token, refresh_token = issue_session(user)
    resp, status = api_response(
        {
            "user": user_out_schema.dump(user),
            "accessToken": access_token,
            "refreshToken": refresh_token,
        },
        "User logged in successfully",
    )
    return set_auth_cookies(resp, access_token, refresh_token), status


@bp.post("/logout")
@jwt_required()
def logout():
    """
    Logout: clears the stored refresh token and both cookies.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: Logged out
      401:
        description: Unauthorized
    """
    revoke_session(g.current_user)
    resp, status = api_response({}, "User logged out")
    return clear_auth_cookies(resp), status


@bp.post("/refresh-token")
def refresh_access_token():
    """
    Use the refresh token (cookie or body) to obtain a new token pair (rotation).
    ---
    tags:
      - Users
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refreshToken: { type: string }
    responses:
      200:
        description: New access and refresh tokens
      401:
        description: Missing, invalid or superseded refresh token
    """
    body = refresh_schema.load(request.get_json(silent=True) or {})
    presented = request.cookies.get(current_app.config["REFRESH_COOKIE_NAME"]) or body.get("refresh_token")

    access_token, refresh_token = rotate_session(presented)
    resp, status = api_response(
        {"accessToken": access_token, "refreshToken": refresh_token},
        "Access token refreshed",
    )
    return set_auth_cookies(resp, access_token, refresh_token), status


@bp.post("/change-password")
@jwt_required()
def change_password():
    """
    Change the current user's password.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             oldPassword: { type: string }
             newPassword: { type: string }
    responses:
      200:
        description: Password changed
      400:
        description: Wrong old password or invalid new password
    """
    data = change_password_schema.load(request.get_json(silent=True) or {})
    user = g.current_user
    if not verify_password(data["old_password"], user.password):
        raise RequestValidationError("Invalid old password")
    user.password = data["new_password"]
    users.save(user)
    return api_response({}, "Password changed successfully")


@bp.get("/current-user")
@jwt_required()
def current_user():
    """
    Get current user info.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    return api_response(user_out_schema.dump(g.current_user), "Current user fetched successfully")


@bp.patch("/update-account")
@jwt_required()
def update_account():
    """
    Update full name and email.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             fullName: { type: string }
             email: { type: string }
    responses:
      200: { description: Updated }
      409: { description: Email already taken }
    """
    data = update_account_schema.load(request.get_json(silent=True) or {})
    user = g.current_user
    if data["email"] != user.email:
        taken = users.find_one(email=data["email"])
        if taken and taken.id != user.id:
            raise Conflict("Email is already in use")
    user.full_name = data["full_name"]
    user.email = data["email"]
    users.save(user)
    return api_response(user_out_schema.dump(user), "Account details updated successfully")


def _replace_image(field: str, folder: str, attr: str, label: str):
    upload = request.files.get(field)
    if upload is None or not upload.filename:
        raise RequestValidationError(f"{label} file is missing")
    user = g.current_user
    previous = getattr(user, attr)
    setattr(user, attr, save_upload(upload, folder))
    users.save(user)
    delete_media(previous)
    return user


@bp.patch("/avatar")
@jwt_required()
def update_avatar():
    """
    Replace the avatar image.
    ---
    tags: [Users]
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
    parameters:
      - { in: formData, name: avatar, type: file, required: true }
    responses:
      200: { description: Updated }
      400: { description: Missing file }
    """
    user = _replace_image("avatar", "avatars", "avatar", "Avatar")
    return api_response(user_out_schema.dump(user), "Avatar image updated successfully")


@bp.patch("/cover-image")
@jwt_required()
def update_cover_image():
    """
    Replace the cover image.
    ---
    tags: [Users]
    security:
      - Bearer: []
    consumes:
      - multipart/form-data
    parameters:
      - { in: formData, name: coverImage, type: file, required: true }
    responses:
      200: { description: Updated }
      400: { description: Missing file }
    """
    user = _replace_image("coverImage", "covers", "cover_image", "Cover image")
    return api_response(user_out_schema.dump(user), "Cover image updated successfully")


@bp.get("/c/<username>")
@jwt_required()
def channel_profile(username: str):
    """
    Public channel profile with subscription counts.
    ---
    tags: [Users]
    security:
      - Bearer: []
    parameters:
      - { in: path, name: username, type: string, required: true }
    responses:
      200: { description: OK }
      404: { description: Channel does not exist }
    """
    profile = users.channel_profile(username, g.current_user.id)
    if profile is None:
        raise NotFound("Channel does not exist")
    user = profile.pop("user")
    payload = {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "full_name": user.full_name,
        "avatar": user.avatar,
        "cover_image": user.cover_image,
        **profile,
    }
    return api_response(channel_profile_schema.dump(payload), "User channel fetched successfully")


@bp.get("/history")
@jwt_required()
def watch_history():
    """
    Videos the current user has watched, most recent first.
    ---
    tags: [Users]
    security:
      - Bearer: []
    responses:
      200: { description: OK }
    """
    rows = users.watch_history(g.current_user.id)
    return api_response(history_out_schema.dump(rows), "Watch history fetched successfully")
