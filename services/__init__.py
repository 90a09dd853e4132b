"""Business services. create_app builds one registry per application."""
from dataclasses import dataclass
from typing import Any, Mapping

from services.auth_service import AuthService
from services.base import EntityService
from services.entities import BranchService, PhoneService, UserPermissionService, build_entity_services
from services.user_service import UserService


@dataclass
class ServiceRegistry:
    auth: AuthService
    users: UserService
    banks: EntityService
    branches: BranchService
    colors: EntityService
    reimbursement_types: EntityService
    cek_giro_fail_statuses: EntityService
    phones: PhoneService
    user_permissions: UserPermissionService


def build_services(storage, config: Mapping[str, Any]) -> ServiceRegistry:
    max_limit = config.get("PAGINATION_MAX_LIMIT", 100)
    users = UserService(storage, max_limit)
    return ServiceRegistry(
        auth=AuthService(storage, users, config),
        users=users,
        **build_entity_services(storage, max_limit),
    )
