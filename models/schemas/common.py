import uuid

from marshmallow import Schema, fields, ValidationError


def is_valid_id(raw) -> bool:
    """True when `raw` is a canonical UUID string (the id format of every table)."""
    if not isinstance(raw, str):
        return False
    try:
        return str(uuid.UUID(raw)) == raw.lower()
    except ValueError:
        return False


def not_blank(value: str) -> None:
    if value is None or not value.strip():
        raise ValidationError("Field cannot be blank.")


class OwnerSchema(Schema):
    """Public profile snippet embedded in videos, comments, tweets."""
    id = fields.String()
    username = fields.String()
    full_name = fields.String(data_key="fullName")
    avatar = fields.String()
