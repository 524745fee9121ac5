"""
security helpers:
- Argon2 password hashing via argon2-cffi
- JWT creation/verification via PyJWT, one signing context per token class
- JTI generation for token identifiers
"""
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError, VerificationError, InvalidHashError

from flask import current_app

ph = PasswordHasher()


class TokenVerificationError(Exception):
    """A token could not be trusted."""


class InvalidSignature(TokenVerificationError):
    pass


class TokenExpired(TokenVerificationError):
    pass


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2
    """
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """ Verify a plaintext password using argon2
    """
    if not password or not password_hash:
        return False
    try:
        return ph.verify(password_hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _encode(claims: Dict[str, Any], secret: str, lifetime: timedelta) -> str:
    now = _now()
    payload = {
        **claims,
        "iat": int(now.timestamp()),
        "exp": int((now + lifetime).timestamp()),
        "jti": generate_jti(),
    }
    return jwt.encode(payload, secret, algorithm=current_app.config["JWT_ALGORITHM"])


def issue_access_token(user, expires_delta: Optional[timedelta] = None) -> str:
    """Short-lived token carrying the user's id and profile snippet."""
    claims = {
        "sub": str(user.id),
        "email": user.email,
        "username": user.username,
        "fullName": user.full_name,
        "type": "access",
    }
    return _encode(
        claims,
        current_app.config["ACCESS_TOKEN_SECRET"],
        expires_delta if expires_delta is not None else current_app.config["ACCESS_TOKEN_EXPIRES"],
    )


def issue_refresh_token(user, expires_delta: Optional[timedelta] = None) -> str:
    """Long-lived token carrying only the user's id."""
    return _encode(
        {"sub": str(user.id), "type": "refresh"},
        current_app.config["REFRESH_TOKEN_SECRET"],
        expires_delta if expires_delta is not None else current_app.config["REFRESH_TOKEN_EXPIRES"],
    )


def verify_token(token: str, secret: str, expected_type: Optional[str] = None) -> Dict[str, Any]:
    """
    Decode and validate a JWT. Raises TokenExpired or InvalidSignature.
    If expected_type is given the "type" claim must match it.
    """
    try:
        decoded = jwt.decode(
            token, secret, algorithms=[current_app.config["JWT_ALGORITHM"]]
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenExpired("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise InvalidSignature(f"Invalid token: {exc}") from exc

    if expected_type and decoded.get("type") != expected_type:
        raise InvalidSignature("Wrong token type")
    return decoded
