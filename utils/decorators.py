from __future__ import annotations
from functools import wraps
from typing import Iterable
from flask import request, g, current_app
from models.user import User
from utils.exceptions import AuthenticationError, AuthorizationError
from utils.security import ACCESS, decode_token, extract_token_from_header


def current_services():
    """ServiceRegistry built by create_app."""
    return current_app.extensions["services"]


def jwt_required():
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            token = extract_token_from_header(request.headers.get("Authorization"))
            if not token:
                raise AuthenticationError("Access token is required")
            decoded = decode_token(token, expected_type=ACCESS)

            services = current_services()
            user = services.users.storage.get(User, decoded.get("userId"))
            if user is None:
                raise AuthenticationError("Invalid or expired token")
            g.current_user = user
            g.token_claims = decoded
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def roles_required(required_roles: Iterable):
    """
    Allow access if the authenticated user's role is one of required_roles.
    Implies jwt_required().
    """
    req = frozenset(required_roles or [])

    def decorator(fn):
        @wraps(fn)
        @jwt_required()
        def wrapper(*args, **kwargs):
            if g.current_user.role not in req:
                raise AuthorizationError("Insufficient permissions")
            return fn(*args, **kwargs)

        return wrapper

    return decorator
