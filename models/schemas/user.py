from marshmallow import Schema, fields, pre_load, validates, validates_schema, ValidationError, validate

from models.schemas.common import not_blank


def _norm(v):
    return v.strip().lower() if isinstance(v, str) else v


class UserRegisterSchema(Schema):
    username = fields.String(required=True, validate=[not_blank, validate.Length(max=64)])
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)
    full_name = fields.String(required=True, data_key="fullName", validate=[not_blank, validate.Length(max=255)])

    @pre_load
    def normalize(self, data, **kwargs):
        data = dict(data)
        for key in ("username", "email"):
            if key in data:
                data[key] = _norm(data[key])
        return data

    @validates("username")
    def validate_username(self, value, **kwargs):
        if not all(ch.isalnum() or ch in "._-" for ch in value):
            raise ValidationError("Username may contain letters, digits, '.', '_' and '-' only.")

    @validates("password")
    def validate_password(self, value, **kwargs):
        if len(value) < 8:
            raise ValidationError("Password must be at least 8 characters long.")


class UserLoginSchema(Schema):
    username = fields.String()
    email = fields.String()
    password = fields.String(required=True, load_only=True)


class ChangePasswordSchema(Schema):
    old_password = fields.String(required=True, data_key="oldPassword")
    new_password = fields.String(required=True, data_key="newPassword")

    @validates("new_password")
    def validate_new_password(self, value, **kwargs):
        if len(value) < 8:
            raise ValidationError("Password must be at least 8 characters long.")

    @validates_schema
    def validate_differs(self, data, **kwargs):
        if data.get("old_password") == data.get("new_password"):
            raise ValidationError("New password must differ from the old one.", "newPassword")


class UpdateAccountSchema(Schema):
    full_name = fields.String(required=True, data_key="fullName", validate=[not_blank, validate.Length(max=255)])
    email = fields.Email(required=True)

    @pre_load
    def normalize(self, data, **kwargs):
        data = dict(data)
        if "email" in data:
            data["email"] = _norm(data["email"])
        return data


class RefreshTokenSchema(Schema):
    refresh_token = fields.String(data_key="refreshToken", load_default=None)


class UserOutSchema(Schema):
    id = fields.String()
    username = fields.String()
    email = fields.String()
    full_name = fields.String(data_key="fullName")
    avatar = fields.String()
    cover_image = fields.String(data_key="coverImage")
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")


class ChannelProfileSchema(Schema):
    id = fields.String()
    username = fields.String()
    email = fields.String()
    full_name = fields.String(data_key="fullName")
    avatar = fields.String()
    cover_image = fields.String(data_key="coverImage")
    subscribers_count = fields.Integer(data_key="subscribersCount")
    channels_subscribed_to_count = fields.Integer(data_key="channelsSubscribedToCount")
    is_subscribed = fields.Boolean(data_key="isSubscribed")
