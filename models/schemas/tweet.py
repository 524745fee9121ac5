from marshmallow import Schema, fields, validate

from models.schemas.common import OwnerSchema, not_blank


class TweetSchema(Schema):
    content = fields.String(required=True, validate=[not_blank, validate.Length(max=280)])


class TweetOutSchema(Schema):
    id = fields.String()
    content = fields.String()
    owner = fields.Nested(OwnerSchema)
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
