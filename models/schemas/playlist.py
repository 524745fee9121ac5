from marshmallow import Schema, fields, validate, validates_schema, ValidationError

from models.schemas.common import not_blank


class PlaylistCreateSchema(Schema):
    name = fields.String(required=True, validate=[not_blank, validate.Length(max=255)])
    description = fields.String(required=True, validate=not_blank)


class PlaylistUpdateSchema(Schema):
    name = fields.String(validate=[not_blank, validate.Length(max=255)])
    description = fields.String(validate=not_blank)

    @validates_schema
    def _require_one(self, data, **kwargs):
        if not data:
            raise ValidationError("Provide a name or a description to update.")


class PlaylistOutSchema(Schema):
    id = fields.String()
    name = fields.String()
    description = fields.String()
    owner_id = fields.String(data_key="owner")
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
