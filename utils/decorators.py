from __future__ import annotations
from functools import wraps
from flask import request, g, current_app

from api.errors import InvalidToken, Unauthenticated
from models.repositories import users
from utils.security import TokenVerificationError, verify_token


def _bearer_token() -> str | None:
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        return None
    return auth.split(" ", 1)[1].strip() or None


def jwt_required():
    """
    Auth gate: the access token comes from the accessToken cookie, else from
    an Authorization: Bearer header. On success the user (without password
    and refresh token) is placed on g.current_user.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            token = request.cookies.get(current_app.config["ACCESS_COOKIE_NAME"]) or _bearer_token()
            if not token:
                raise Unauthenticated("Unauthorized request")
            try:
                decoded = verify_token(token, current_app.config["ACCESS_TOKEN_SECRET"], expected_type="access")
            except TokenVerificationError:
                raise InvalidToken("Invalid access token")

            user = users.find_principal(decoded.get("sub"))
            if not user:
                raise InvalidToken("Invalid access token")
            g.current_user = user
            return fn(*args, **kwargs)

        return wrapper

    return decorator
