from flask import request

from api import roles
from api.resources import Resource, build_blueprint, enum_path_param
from api.utils.responses import paginated, success
from models.enums import Menu, Role
from models.schemas.common import ListQuerySchema
from models.schemas.user_permission import (
    UserPermissionBulkSchema,
    UserPermissionCreateSchema,
    UserPermissionListQuerySchema,
    UserPermissionOutSchema,
    UserPermissionSearchQuerySchema,
)
from utils.decorators import current_services, roles_required

resource = Resource(
    name="user_permissions",
    url_prefix="/user-permissions",
    tag="User permissions",
    label="User permission",
    create_schema=UserPermissionCreateSchema,
    out_schema=UserPermissionOutSchema,
    list_query_schema=UserPermissionListQuerySchema,
    search_query_schema=UserPermissionSearchQuerySchema,
    read_roles=roles.MANAGERS,
    write_roles=roles.PERMISSION_ADMINS,
    delete_roles=roles.PERMISSION_ADMINS,
    stats_roles=roles.MANAGERS,
    by_code=False,
)

bp = build_blueprint(resource)

bulk_schema = UserPermissionBulkSchema()
page_query_schema = ListQuerySchema()
out_list_schema = UserPermissionOutSchema(many=True)


@bp.post("/bulk")
@roles_required(roles.PERMISSION_ADMINS)
def bulk_create_user_permissions():
    """
    Create many permissions at once; combinations that already exist are skipped
    ---
    tags: [User permissions]
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            permissions:
              type: array
              items: { type: object }
    responses:
      201: { description: Created }
      400: { description: Validation error }
    """
    data = bulk_schema.load(request.get_json(silent=True) or {})
    created = current_services().user_permissions.bulk_create(data["permissions"])
    return success(
        {
            "resource": out_list_schema.dump(created),
            "message": f"{len(created)} user permissions created successfully",
        },
        status=201,
    )


@bp.get("/role/<role>")
@roles_required(roles.MANAGERS)
def list_permissions_by_role(role: str):
    """
    List permissions of one role
    ---
    tags: [User permissions]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: role
        type: string
        required: true
    responses:
      200: { description: OK }
      400: { description: Unknown role }
    """
    value = enum_path_param(Role, role, "role")
    query = page_query_schema.load(request.args)
    return paginated(current_services().user_permissions.list_by_role(value, query), out_list_schema)


@bp.get("/menu/<menu>")
@roles_required(roles.MANAGERS)
def list_permissions_by_menu(menu: str):
    """
    List permissions within one menu
    ---
    tags: [User permissions]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: menu
        type: string
        required: true
    responses:
      200: { description: OK }
      400: { description: Unknown menu }
    """
    value = enum_path_param(Menu, menu, "menu")
    query = page_query_schema.load(request.args)
    return paginated(current_services().user_permissions.list_by_menu(value, query), out_list_schema)


@bp.get("/role/<role>/menu/<menu>")
@roles_required(roles.MANAGERS)
def permissions_for_role_and_menu(role: str, menu: str):
    """
    Every sub-menu permission of a role inside a menu, ordered by sub-menu
    ---
    tags: [User permissions]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: role
        type: string
        required: true
      - in: path
        name: menu
        type: string
        required: true
    responses:
      200: { description: OK }
    """
    permissions = current_services().user_permissions.permissions_for(
        enum_path_param(Role, role, "role"),
        enum_path_param(Menu, menu, "menu"),
    )
    return success(out_list_schema.dump(permissions))
