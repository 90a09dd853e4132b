"""
User management blueprint:
- GET/PUT /users/profile        (any authenticated user, self only)
- POST    /users                (create; same rules as register)
- GET     /users                (list, ?role= filter, search)
- GET     /users/stats
- GET     /users/role/<role>
- GET/PUT/DELETE /users/<id>    (subject to the role hierarchy)
- PUT     /users/<id>/role
"""
from __future__ import annotations

from flask import Blueprint, request, g

from api import roles
from api.resources import enum_path_param
from api.utils.responses import created, deleted, paginated, success, updated
from models.enums import Role
from models.schemas.common import ListQuerySchema
from models.schemas.user import (
    ProfileUpdateSchema,
    UserCreateSchema,
    UserListQuerySchema,
    UserOutSchema,
    UserRoleUpdateSchema,
    UserUpdateSchema,
)
from utils.decorators import current_services, jwt_required, roles_required
from utils.exceptions import NotFoundError

bp = Blueprint("users", __name__, url_prefix="/users")

user_create_schema = UserCreateSchema()
user_update_schema = UserUpdateSchema()
user_role_schema = UserRoleUpdateSchema()
profile_schema = ProfileUpdateSchema()
list_query_schema = UserListQuerySchema()
page_query_schema = ListQuerySchema()
user_out_schema = UserOutSchema()
user_list_out_schema = UserOutSchema(many=True)


def _body():
    return request.get_json(silent=True) or {}


@bp.get("/profile")
@jwt_required()
def get_profile():
    """
    Current user's profile
    ---
    tags: [Users]
    security:
      - Bearer: []
    responses:
      200: { description: OK }
      401: { description: Unauthorized }
    """
    return success(user_out_schema.dump(g.current_user))


@bp.put("/profile")
@jwt_required()
def update_profile():
    """
    Update own name, phone or address
    ---
    tags: [Users]
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            name: { type: string }
            phone: { type: string }
            address: { type: string }
    responses:
      200: { description: OK }
      409: { description: Phone number already registered }
    """
    data = profile_schema.load(_body(), partial=True)
    user = current_services().users.update_profile(g.current_user.id, data)
    return updated(user_out_schema.dump(user), "Profile updated successfully")


@bp.post("")
@roles_required(roles.USER_MANAGERS)
def create_user():
    """
    Create a user
    ---
    tags: [Users]
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [email, password, name, username, phone, role, code]
          properties:
            email: { type: string }
            password: { type: string }
            name: { type: string }
            username: { type: string }
            phone: { type: string }
            role: { type: string }
            address: { type: string }
            code: { type: string }
            expenseLimit: { type: number }
            discountLimit: { type: number }
    responses:
      201: { description: Created }
      400: { description: Validation error }
      403: { description: Forbidden }
      409: { description: Conflict }
    """
    data = user_create_schema.load(_body())
    users = current_services().users
    users.check_role_grant(g.current_user, data.get("role"))
    user = users.create(data)
    return created(user_out_schema.dump(user), "User created successfully")


@bp.get("")
@roles_required(roles.USER_MANAGERS)
def list_users():
    """
    List users (pagination, sorting, search, role filter)
    ---
    tags: [Users]
    security:
      - Bearer: []
    parameters:
      - in: query
        name: page
        type: integer
        default: 1
      - in: query
        name: limit
        type: integer
        default: 10
      - in: query
        name: sortBy
        type: string
        description: "Allowed: name, email, username, code, role, createdAt"
      - in: query
        name: sortOrder
        type: string
        enum: [asc, desc]
      - in: query
        name: search
        type: string
      - in: query
        name: role
        type: string
    responses:
      200: { description: OK }
    """
    query = list_query_schema.load(request.args)
    return paginated(current_services().users.list(query), user_list_out_schema)


@bp.get("/stats")
@roles_required(roles.USER_MANAGERS)
def user_stats():
    """
    User counts for the dashboard
    ---
    tags: [Users]
    security:
      - Bearer: []
    responses:
      200: { description: OK }
    """
    return success(current_services().users.stats())


@bp.get("/role/<role>")
@roles_required(roles.USER_MANAGERS)
def list_users_by_role(role: str):
    """
    List users with one role (default sort: name)
    ---
    tags: [Users]
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
    return paginated(current_services().users.list_by_role(value, query), user_list_out_schema)


@bp.get("/<int:user_id>")
@roles_required(roles.USER_MANAGERS)
def get_user(user_id: int):
    """
    Get a user by id
    ---
    tags: [Users]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: user_id
        type: integer
        required: true
    responses:
      200: { description: OK }
      403: { description: Forbidden }
      404: { description: Not found }
    """
    users = current_services().users
    users.authorize(g.current_user, user_id, "read")
    user = users.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return success(user_out_schema.dump(user))


@bp.put("/<int:user_id>")
@roles_required(roles.USER_MANAGERS)
def update_user(user_id: int):
    """
    Update a user (partial). code and password cannot be changed here.
    ---
    tags: [Users]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: user_id
        type: integer
        required: true
      - in: body
        name: body
        schema:
          type: object
    responses:
      200: { description: OK }
      403: { description: Forbidden }
      404: { description: Not found }
      409: { description: Conflict }
    """
    data = user_update_schema.load(_body(), partial=True)
    users = current_services().users
    users.authorize(g.current_user, user_id, "update", data)
    user = users.update(user_id, data)
    return updated(user_out_schema.dump(user), "User updated successfully")


@bp.put("/<int:user_id>/role")
@roles_required(roles.ADMINS)
def update_user_role(user_id: int):
    """
    Change a user's role
    ---
    tags: [Users]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: user_id
        type: integer
        required: true
      - in: body
        name: body
        schema:
          type: object
          properties:
            role: { type: string }
    responses:
      200: { description: OK }
      403: { description: Forbidden }
      404: { description: Not found }
    """
    data = user_role_schema.load(_body())
    users = current_services().users
    users.authorize(g.current_user, user_id, "update", data)
    user = users.update(user_id, data)
    return updated(user_out_schema.dump(user), "User role updated successfully")


@bp.delete("/<int:user_id>")
@roles_required(roles.USER_MANAGERS)
def delete_user(user_id: int):
    """
    Delete a user (hard delete; their sessions go with them)
    ---
    tags: [Users]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: user_id
        type: integer
        required: true
    responses:
      200: { description: Deleted }
      403: { description: Forbidden }
      404: { description: Not found }
    """
    users = current_services().users
    users.authorize(g.current_user, user_id, "delete")
    users.delete(user_id)
    return deleted("User deleted successfully")
