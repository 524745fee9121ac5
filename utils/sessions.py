"""
Session lifecycle on top of utils.security:
- issue_session: login, writes the refresh token slot once
- rotate_session: refresh cycle with single-slot reuse detection
- revoke_session: logout, clears the slot
"""
from __future__ import annotations

import hmac
import logging
from typing import Tuple

from flask import current_app

from api.errors import InvalidToken, TokenStale, Unauthenticated
from models.repositories import users
from utils.security import (
    TokenVerificationError,
    issue_access_token,
    issue_refresh_token,
    verify_token,
)

logger = logging.getLogger(__name__)


def issue_session(user) -> Tuple[str, str]:
    """Mint an access/refresh pair and store the refresh token on the user."""
    access_token = issue_access_token(user)
    refresh_token = issue_refresh_token(user)
    users.set_refresh_token(user.id, refresh_token)
    return access_token, refresh_token


def rotate_session(presented: str | None) -> Tuple[str, str]:
    """
    Exchange a refresh token for a new pair. The presented token must be the
    one currently stored on the user; the swap itself is conditional on that
    value so only one of two concurrent refreshes can win.
    """
    if not presented:
        raise Unauthenticated("Unauthorized request")

    try:
        claims = verify_token(presented, current_app.config["REFRESH_TOKEN_SECRET"], expected_type="refresh")
    except TokenVerificationError:
        raise InvalidToken("Invalid refresh token")

    user = users.find_by_id(claims.get("sub"))
    if user is None:
        raise InvalidToken("Invalid refresh token")

    stored = user.refresh_token or ""
    if not hmac.compare_digest(stored.encode(), presented.encode()):
        logger.warning("Superseded refresh token presented for user %s", user.id)
        raise TokenStale("Refresh token is expired or used")

    access_token = issue_access_token(user)
    new_refresh_token = issue_refresh_token(user)
    if not users.replace_refresh_token(user.id, presented, new_refresh_token):
        logger.warning("Concurrent refresh lost the race for user %s", user.id)
        raise TokenStale("Refresh token is expired or used")
    return access_token, new_refresh_token


def revoke_session(user) -> None:
    users.set_refresh_token(user.id, None)
