from marshmallow import fields

from models.schemas.common import InputSchema, TimestampedOutSchema, required_string


class ColorCreateSchema(InputSchema):
    # "#RRGGBB"; shape checked by the color service
    code = required_string(label="Code")
    name = required_string(50, label="Name")


class ColorOutSchema(TimestampedOutSchema):
    code = fields.String()
    name = fields.String()
