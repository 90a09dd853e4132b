from marshmallow import fields

from models.enums import PriceType
from models.schemas.common import (
    InputSchema,
    ListQuerySchema,
    TimestampedOutSchema,
    non_negative_number,
    optional_string,
    required_string,
)


class BranchCreateSchema(InputSchema):
    price_type = fields.Enum(PriceType, data_key="priceType")
    code = required_string(label="Code")
    name = required_string(50, label="Name")
    phone = optional_string(50, label="Phone")
    address = required_string(255, label="Address")
    img = fields.String(allow_none=True)
    depreciation_year_1 = non_negative_number(data_key="depreciationYear1")
    depreciation_year_2 = non_negative_number(data_key="depreciationYear2")
    depreciation_year_3 = non_negative_number(data_key="depreciationYear3")
    depreciation_year_4 = non_negative_number(data_key="depreciationYear4")


class BranchListQuerySchema(ListQuerySchema):
    price_type = fields.Enum(PriceType, data_key="priceType", load_default=None)


class BranchOutSchema(TimestampedOutSchema):
    price_type = fields.Enum(PriceType, data_key="priceType")
    code = fields.String()
    name = fields.String()
    phone = fields.String(allow_none=True)
    address = fields.String()
    img = fields.String(allow_none=True)
    depreciation_year_1 = fields.Float(allow_none=True, data_key="depreciationYear1")
    depreciation_year_2 = fields.Float(allow_none=True, data_key="depreciationYear2")
    depreciation_year_3 = fields.Float(allow_none=True, data_key="depreciationYear3")
    depreciation_year_4 = fields.Float(allow_none=True, data_key="depreciationYear4")
