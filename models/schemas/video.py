from marshmallow import Schema, fields, validate, validates_schema, ValidationError, EXCLUDE

from models.schemas.common import OwnerSchema, is_valid_id, not_blank


class VideoCreateSchema(Schema):
    title = fields.String(required=True, validate=[not_blank, validate.Length(max=255)])
    description = fields.String(required=True, validate=not_blank)
    duration = fields.Float(load_default=0, validate=validate.Range(min=0))


class VideoUpdateSchema(Schema):
    # All optional, but validate if present
    title = fields.String(validate=[not_blank, validate.Length(max=255)])
    description = fields.String(validate=not_blank)


class VideoOutSchema(Schema):
    id = fields.String()
    video_file = fields.String(data_key="videoFile")
    thumbnail = fields.String()
    title = fields.String()
    description = fields.String()
    duration = fields.Float()
    views = fields.Integer()
    is_published = fields.Boolean(data_key="isPublished")
    owner = fields.Nested(OwnerSchema)
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")


class VideoListQuerySchema(Schema):
    class Meta:
        unknown = EXCLUDE

    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(load_default=10, validate=validate.Range(min=1, max=100))
    query = fields.String(load_default=None)
    sort_by = fields.String(
        data_key="sortBy",
        load_default="createdAt",
        validate=validate.OneOf(["createdAt", "views", "duration", "title"]),
    )
    sort_type = fields.String(data_key="sortType", load_default="desc", validate=validate.OneOf(["asc", "desc"]))
    user_id = fields.String(data_key="userId", load_default=None)

    @validates_schema
    def _validate_user_id(self, data, **kwargs):
        if data.get("user_id") and not is_valid_id(data["user_id"]):
            raise ValidationError("Invalid User ID", "userId")
