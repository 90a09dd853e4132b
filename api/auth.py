"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/refresh
- POST /auth/logout           (auth)
- POST /auth/change-password  (auth, rate limited per user)
- POST /auth/revoke-all       (auth)
- GET  /auth/me               (auth)
- GET  /auth/validate         (auth)

The implementation:
- Uses argon2 for password and refresh-token hashing (via utils.security)
- Issues access tokens and single-use refresh tokens (JWTs signed with HS256)
- Stores one RefreshToken row per issued refresh token so sessions can be rotated and revoked
"""
from __future__ import annotations

from flask import Blueprint, request, g

from api.utils.responses import created, success
from models.schemas.user import (
    ChangePasswordSchema,
    LogoutSchema,
    RefreshTokenSchema,
    UserCreateSchema,
    UserLoginSchema,
    UserOutSchema,
)
from utils.decorators import current_services, jwt_required
from utils.rate_limit import rate_limit_per_user

PASSWORD_CHANGE_ATTEMPTS = 5
PASSWORD_CHANGE_WINDOW = 15 * 60

bp = Blueprint("auth", __name__, url_prefix="/auth")

user_create_schema = UserCreateSchema()
user_out_schema = UserOutSchema()
user_login_schema = UserLoginSchema()
refresh_schema = RefreshTokenSchema()
logout_schema = LogoutSchema()
change_password_schema = ChangePasswordSchema()


def _body():
    return request.get_json(silent=True) or {}


@bp.post("/register")
def register():
    """
    Register a new user.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
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
            code: { type: string, maxLength: 10 }
    responses:
      201:
        description: Created
      400:
        description: Validation error
      409:
        description: Email, username, phone or code already in use
    """
    data = user_create_schema.load(_body())
    user = current_services().auth.register(data)
    return created(user_out_schema.dump(user), "User registered successfully")


@bp.post("/login")
def login():
    """
    Login: return the user with an access token and a refresh token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      401:
        description: Invalid email or password
    """
    data = user_login_schema.load(_body())
    result = current_services().auth.login(data["email"], data["password"])
    return success({
        "user": user_out_schema.dump(result["user"]),
        "tokens": result["tokens"],
        "message": "Login successful",
    })


@bp.post("/refresh")
def refresh():
    """
    Exchange a refresh token for a new token pair (the old refresh token is consumed)
    ---
    tags:
      - Auth
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            refreshToken: { type: string }
    responses:
      200:
        description: New tokens
      401:
        description: Invalid or expired refresh token
    """
    data = refresh_schema.load(_body())
    tokens = current_services().auth.refresh(data["refresh_token"])
    return success(tokens)


@bp.post("/logout")
@jwt_required()
def logout():
    """
    Logout: revoke the given refresh token, or every session when none is sent
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        required: false
        schema:
          type: object
          properties:
            refreshToken: { type: string }
    responses:
      200:
        description: Logged out
      401:
        description: Unauthorized
    """
    data = logout_schema.load(_body())
    current_services().auth.logout(g.current_user.id, data.get("refresh_token"))
    return success({"message": "Logout successful"})


@bp.post("/change-password")
@jwt_required()
@rate_limit_per_user(PASSWORD_CHANGE_ATTEMPTS, PASSWORD_CHANGE_WINDOW)
def change_password():
    """
    Change the current user's password. Every session is revoked afterwards.
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            currentPassword: { type: string }
            newPassword: { type: string }
    responses:
      200:
        description: Password changed
      400:
        description: Weak or unchanged password
      401:
        description: Current password is incorrect
      429:
        description: Too many attempts
    """
    data = change_password_schema.load(_body())
    current_services().auth.change_password(g.current_user.id, data["current_password"], data["new_password"])
    return success({"message": "Password changed successfully. Please login again."})


@bp.post("/revoke-all")
@jwt_required()
def revoke_all():
    """
    Revoke every refresh token of the current user
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: Number of revoked sessions
    """
    count = current_services().auth.revoke_all_tokens(g.current_user.id)
    return success({"revoked": count, "message": "All sessions revoked"})


@bp.get("/me")
@jwt_required()
def me():
    """
    Return current authenticated user's info
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
    """
    return success(user_out_schema.dump(g.current_user))


@bp.get("/validate")
@jwt_required()
def validate():
    """
    Check that the access token is valid
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: Token is valid
      401:
        description: Unauthorized
    """
    return success({"valid": True, "user": user_out_schema.dump(g.current_user)})
