from marshmallow import fields

from models.schemas.common import InputSchema, TimestampedOutSchema, required_string


class BankCreateSchema(InputSchema):
    code = required_string(label="Code")
    name = required_string(50, label="Name")


class BankOutSchema(TimestampedOutSchema):
    code = fields.String()
    name = fields.String()
