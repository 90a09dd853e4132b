from marshmallow import Schema, fields, validate

from models.enums import Menu, Role, SubMenu
from models.schemas.common import InputSchema, ListQuerySchema, SearchQuerySchema, TimestampedOutSchema


class UserPermissionCreateSchema(InputSchema):
    role = fields.Enum(Role, required=True)
    menu = fields.Enum(Menu, required=True)
    sub_menu = fields.Enum(SubMenu, required=True, data_key="subMenu")
    view = fields.Boolean(load_default=False)
    create = fields.Boolean(load_default=False)
    update = fields.Boolean(load_default=False)
    delete = fields.Boolean(load_default=False)


class UserPermissionBulkSchema(Schema):
    permissions = fields.List(
        fields.Nested(UserPermissionCreateSchema),
        required=True,
        validate=validate.Length(min=1, error="At least one permission is required"),
    )


class UserPermissionListQuerySchema(ListQuerySchema):
    role = fields.Enum(Role, load_default=None)
    menu = fields.Enum(Menu, load_default=None)
    sub_menu = fields.Enum(SubMenu, data_key="subMenu", load_default=None)


class UserPermissionSearchQuerySchema(SearchQuerySchema, UserPermissionListQuerySchema):
    pass


class UserPermissionOutSchema(TimestampedOutSchema):
    role = fields.Enum(Role)
    menu = fields.Enum(Menu)
    sub_menu = fields.Enum(SubMenu, data_key="subMenu")
    view = fields.Boolean()
    create = fields.Boolean()
    update = fields.Boolean()
    delete = fields.Boolean()
