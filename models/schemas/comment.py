from marshmallow import Schema, fields, validate

from models.schemas.common import OwnerSchema, not_blank


class CommentSchema(Schema):
    content = fields.String(required=True, validate=[not_blank, validate.Length(max=5000)])


class CommentOutSchema(Schema):
    id = fields.String()
    content = fields.String()
    video_id = fields.String(data_key="videoId")
    owner = fields.Nested(OwnerSchema)
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
