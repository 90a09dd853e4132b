from marshmallow import Schema, fields, pre_load, validate

from models.enums import Role
from models.schemas.common import (
    InputSchema,
    ListQuerySchema,
    TimestampedOutSchema,
    non_negative_number,
    optional_string,
    required_string,
)
from models.schemas.phone import PHONE_PATTERN


def _norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


def _phone_field(**kwargs):
    return fields.String(
        validate=[
            validate.Length(min=1, error="Phone is required"),
            validate.Regexp(PHONE_PATTERN, error="Invalid phone number format"),
        ],
        **kwargs,
    )


_USERNAME = validate.Length(min=3, max=50, error="Username must be between 3 and 50 characters")


class UserCreateSchema(InputSchema):
    """Register and admin create share one body. Password strength is checked by the user service."""
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1))
    name = required_string(50, label="Name")
    username = fields.String(required=True, validate=_USERNAME)
    phone = _phone_field(required=True)
    role = fields.Enum(Role, required=True)
    address = optional_string(255, label="Address")
    code = required_string(10, label="Code")
    expense_limit = non_negative_number(data_key="expenseLimit")
    discount_limit = non_negative_number(data_key="discountLimit")

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = {**data, "email": _norm_email(data["email"])}
        return data


class UserUpdateSchema(InputSchema):
    """Admin update. code and password are not accepted here."""
    email = fields.Email()
    name = required_string(50, label="Name")
    username = fields.String(validate=_USERNAME)
    phone = _phone_field()
    role = fields.Enum(Role)
    address = optional_string(255, label="Address")
    expense_limit = non_negative_number(data_key="expenseLimit")
    discount_limit = non_negative_number(data_key="discountLimit")

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = {**data, "email": _norm_email(data["email"])}
        return data


class UserRoleUpdateSchema(InputSchema):
    role = fields.Enum(Role, required=True)


class ProfileUpdateSchema(InputSchema):
    name = required_string(50, label="Name")
    phone = _phone_field()
    address = optional_string(255, label="Address")


class UserLoginSchema(InputSchema):
    email = fields.Email(required=True)
    password = fields.String(required=True, validate=validate.Length(min=1, error="Password is required"))

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = {**data, "email": _norm_email(data["email"])}
        return data


class RefreshTokenSchema(InputSchema):
    refresh_token = fields.String(
        required=True,
        data_key="refreshToken",
        validate=validate.Length(min=1, error="Refresh token is required"),
    )


class LogoutSchema(InputSchema):
    refresh_token = fields.String(data_key="refreshToken", load_default=None, allow_none=True)


class ChangePasswordSchema(InputSchema):
    current_password = fields.String(
        required=True,
        data_key="currentPassword",
        validate=validate.Length(min=1, error="Current password is required"),
    )
    new_password = fields.String(
        required=True,
        data_key="newPassword",
        validate=validate.Length(min=1, error="New password is required"),
    )


class UserListQuerySchema(ListQuerySchema):
    role = fields.Enum(Role, load_default=None)


class UserOutSchema(TimestampedOutSchema):
    code = fields.String()
    name = fields.String()
    email = fields.String()
    username = fields.String()
    phone = fields.String()
    address = fields.String(allow_none=True)
    role = fields.Enum(Role)
    expense_limit = fields.Float(data_key="expenseLimit")
    discount_limit = fields.Float(data_key="discountLimit")
    point = fields.Float()
    balance = fields.Float()


class TokenPairSchema(Schema):
    access_token = fields.String(data_key="accessToken")
    refresh_token = fields.String(data_key="refreshToken")
