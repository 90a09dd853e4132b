from marshmallow import fields, validate

from models.enums import Module
from models.schemas.common import InputSchema, ListQuerySchema, TimestampedOutSchema, required_string

PHONE_PATTERN = r"^\+?[\d\s\-()]+$"


class PhoneCreateSchema(InputSchema):
    module = fields.Enum(Module, required=True)
    owner_code = required_string(50, label="Owner code", data_key="ownerCode")
    phone = fields.String(
        required=True,
        validate=[
            validate.Length(min=1, error="Phone is required"),
            validate.Regexp(PHONE_PATTERN, error="Invalid phone number format"),
        ],
    )


class PhoneListQuerySchema(ListQuerySchema):
    module = fields.Enum(Module, load_default=None)
    owner_code = fields.String(data_key="ownerCode", load_default=None)


class PhoneOutSchema(TimestampedOutSchema):
    module = fields.Enum(Module)
    owner_code = fields.String(data_key="ownerCode")
    phone = fields.String()
