"""
User management: the generic entity service plus password handling,
self-service profile updates, the role hierarchy and user statistics.
"""
from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Dict, Mapping, Optional

from models.base_model import utcnow
from models.enums import ADMIN_ROLES, STAFF_ROLES, Role
from models.user import User
from services.base import EntityDescriptor, EntityService, UniqueRule, max_length
from utils.exceptions import AuthorizationError, NotFoundError, ValidationError
from utils.security import hash_password, validate_password_strength

logger = logging.getLogger(__name__)

RECENT_WINDOW = timedelta(days=30)

# fields an admin update never touches
IMMUTABLE_FIELDS = ("code", "password")
PROFILE_FIELDS = ("name", "phone", "address")
PRIVILEGED_FIELDS = ("role", "expense_limit", "discount_limit")
NUMERIC_DEFAULTS = ("expense_limit", "discount_limit", "point", "balance")

USERS = EntityDescriptor(
    model=User,
    label="User",
    natural_key="code",
    uppercase_code=False,
    # checked in this order; the first conflict wins
    unique_rules=(
        UniqueRule(("email",), "User with this email already exists", case_insensitive=True),
        UniqueRule(("username",), "Username already taken"),
        UniqueRule(("phone",), "Phone number already registered"),
        UniqueRule(("code",), "User code already exists"),
    ),
    validators={"code": [max_length(10, "User code must be at most 10 characters")]},
    searchable_fields=("name", "email", "username", "code"),
    filter_fields=("role",),
    sort_fields={
        "name": "name",
        "email": "email",
        "username": "username",
        "code": "code",
        "role": "role",
        "createdAt": "created_at",
    },
    group_by=("role",),
)


class UserService(EntityService):
    def __init__(self, storage, max_limit: int = 100):
        super().__init__(storage, USERS, max_limit)

    def _normalize(self, data: Dict[str, Any]) -> Dict[str, Any]:
        data = super()._normalize(data)
        if isinstance(data.get("email"), str):
            data["email"] = data["email"].strip().lower()
        return data

    def create(self, data: Mapping[str, Any]) -> User:
        """
        Create a user. Conflicts are reported in the order email, username,
        phone, code; password strength is checked after uniqueness.
        """
        data = self._normalize(dict(data))
        self._check_unique(data)
        self._validate(data)

        password = data.pop("password", None) or ""
        problems = validate_password_strength(password)
        if problems:
            raise ValidationError("Password does not meet requirements", details={"password": problems})

        for name in NUMERIC_DEFAULTS:
            if data.get(name) is None:
                data[name] = 0

        user = User(password=hash_password(password), **data)
        self.storage.new(user)
        self.storage.save()
        logger.info("Created user id=%s role=%s", user.id, user.role.value)
        return user

    def get_by_email(self, email: str) -> Optional[User]:
        return self.session.query(User).filter(User.email == email.strip().lower()).first()

    def update(self, id: int, data: Mapping[str, Any]) -> User:
        changes = {k: v for k, v in data.items() if k not in IMMUTABLE_FIELDS}
        return super().update(id, changes)

    def update_profile(self, id: int, data: Mapping[str, Any]) -> User:
        """Self-service update limited to name, phone and address."""
        changes = {k: v for k, v in data.items() if k in PROFILE_FIELDS}
        return super().update(id, changes)

    def list_by_role(self, role: Role, query: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        return self.list(query, criteria=[User.role == role], default_sort="name")

    def stats(self) -> Dict[str, Any]:
        since = utcnow() - RECENT_WINDOW
        by_role = super().stats()["byRole"]
        return {
            "total": self.storage.count(User),
            "admins": self.storage.count(User, User.role.in_(ADMIN_ROLES)),
            "staff": self.storage.count(User, User.role.in_(STAFF_ROLES)),
            "recent": self.storage.count(User, User.created_at >= since),
            "byRole": by_role,
        }

    @staticmethod
    def check_role_grant(actor: User, role: Optional[Role]) -> None:
        if role == Role.SUPER_ADMIN and actor.role != Role.SUPER_ADMIN:
            raise AuthorizationError("Only a super admin can grant the SUPER_ADMIN role")

    def authorize(self, actor: User, target_id: int, action: str,
                  changes: Optional[Mapping[str, Any]] = None) -> None:
        """
        Raise AuthorizationError unless actor may perform action ("read",
        "update" or "delete") on the user target_id.
        """
        changes = changes or {}
        if action == "delete" and actor.id == target_id:
            raise AuthorizationError("Cannot delete your own account")
        self.check_role_grant(actor, changes.get("role"))

        if actor.role == Role.SUPER_ADMIN:
            return

        if actor.role in (Role.OWNER, Role.PIMPINAN):
            target = self.get_by_id(target_id)
            if target is None:
                raise NotFoundError("User not found")
            if target.role == Role.SUPER_ADMIN:
                raise AuthorizationError("Access denied")
            return

        if action in ("read", "update") and actor.id == target_id:
            if any(name in changes for name in PRIVILEGED_FIELDS):
                raise AuthorizationError("You cannot change your own role or limits")
            return
        raise AuthorizationError("Access denied")
