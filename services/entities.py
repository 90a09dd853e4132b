"""Descriptors for the reference entities and their entity-specific lookups."""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from models.account_number import AccountNumber
from models.bank import Bank
from models.branch import Branch
from models.cek_giro_fail_status import CekGiroFailStatus
from models.color import Color
from models.enums import Menu, Module, PriceType, Role
from models.expense_category import ExpenseCategory
from models.member import Member
from models.phone import Phone
from models.product_detail import ProductDetail
from models.reimbursement_type import ReimbursementType
from models.user_permission import UserPermission
from services.base import (
    EntityDescriptor,
    EntityService,
    ReferenceCheck,
    UniqueRule,
    exact_length,
    matches,
    max_length,
)
from utils.exceptions import ConflictError

logger = logging.getLogger(__name__)

NAME_CODE_SORT = {"name": "name", "code": "code", "createdAt": "created_at"}

BANKS = EntityDescriptor(
    model=Bank,
    label="Bank",
    unique_rules=(
        UniqueRule(("code",), "Bank with this code already exists"),
        UniqueRule(("name",), "Bank with this name already exists"),
    ),
    validators={"code": [exact_length(3, "Bank code must be exactly 3 characters")]},
    searchable_fields=("name", "code"),
    sort_fields=NAME_CODE_SORT,
    references=(ReferenceCheck(AccountNumber, "bank_code", "account numbers"),),
    usage_reference=ReferenceCheck(AccountNumber, "bank_code", "account numbers"),
)

BRANCHES = EntityDescriptor(
    model=Branch,
    label="Branch",
    unique_rules=(
        UniqueRule(("code",), "Branch with this code already exists"),
        UniqueRule(("name",), "Branch with this name already exists"),
        UniqueRule(("address",), "Branch with this address already exists"),
    ),
    validators={
        "code": [exact_length(3, "Branch code must be exactly 3 characters")],
        "phone": [max_length(50, "Phone must be at most 50 characters")],
    },
    searchable_fields=("name", "code", "address"),
    filter_fields=("price_type",),
    sort_fields=NAME_CODE_SORT,
    references=(
        ReferenceCheck(ExpenseCategory, "branch_code", "expense categories"),
        ReferenceCheck(Member, "branch_code", "members"),
    ),
    usage_reference=ReferenceCheck(Member, "branch_code", "members"),
    group_by=("price_type",),
)

COLORS = EntityDescriptor(
    model=Color,
    label="Color",
    unique_rules=(
        UniqueRule(("code",), "Color with this code already exists"),
        UniqueRule(("name",), "Color with this name already exists"),
    ),
    validators={
        "code": [
            exact_length(7, "Color code must be exactly 7 characters (e.g., #FF0000)"),
            matches(r"#[0-9A-F]{6}", "Color code must be a valid hex color format (e.g., #FF0000)", re.IGNORECASE),
        ],
    },
    searchable_fields=("name", "code"),
    sort_fields=NAME_CODE_SORT,
    references=(ReferenceCheck(ProductDetail, "color_code", "product details"),),
    usage_reference=ReferenceCheck(ProductDetail, "color_code", "product details"),
)

REIMBURSEMENT_TYPES = EntityDescriptor(
    model=ReimbursementType,
    label="Reimbursement type",
    unique_rules=(
        UniqueRule(("code",), "Reimbursement type with this code already exists"),
        UniqueRule(("name",), "Reimbursement type with this name already exists"),
    ),
    validators={"code": [exact_length(7, "Reimbursement type code must be exactly 7 characters")]},
    searchable_fields=("name", "code"),
    sort_fields=NAME_CODE_SORT,
)

CEK_GIRO_FAIL_STATUSES = EntityDescriptor(
    model=CekGiroFailStatus,
    label="Cek giro fail status",
    unique_rules=(
        UniqueRule(("code",), "Cek giro fail status with this code already exists"),
        UniqueRule(("name",), "Cek giro fail status with this name already exists"),
    ),
    validators={"code": [max_length(7, "Cek giro fail status code must be at most 7 characters")]},
    searchable_fields=("name", "code"),
    sort_fields=NAME_CODE_SORT,
)

PHONES = EntityDescriptor(
    model=Phone,
    label="Phone",
    natural_key=None,
    uppercase_code=False,
    unique_rules=(UniqueRule(("phone",), "Phone with this number already exists"),),
    validators={"phone": [max_length(50, "Phone number must be at most 50 characters")]},
    searchable_fields=("phone", "owner_code"),
    filter_fields=("module", "owner_code"),
    sort_fields={"phone": "phone", "ownerCode": "owner_code", "module": "module", "createdAt": "created_at"},
    group_by=("module",),
)

USER_PERMISSIONS = EntityDescriptor(
    model=UserPermission,
    label="User permission",
    natural_key=None,
    uppercase_code=False,
    unique_rules=(
        UniqueRule(
            ("role", "menu", "sub_menu"),
            "User permission with this role, menu, and subMenu combination already exists",
        ),
    ),
    searchable_fields=("role", "menu", "sub_menu"),
    filter_fields=("role", "menu", "sub_menu"),
    sort_fields={"role": "role", "menu": "menu", "subMenu": "sub_menu", "id": "id"},
    default_sort="id",
    group_by=("role", "menu"),
)


class BranchService(EntityService):
    def __init__(self, storage, max_limit: int = 100):
        super().__init__(storage, BRANCHES, max_limit)

    def list_by_price_type(self, price_type: PriceType, query: Optional[Mapping[str, Any]] = None):
        return self.list(query, criteria=[Branch.price_type == price_type])


class PhoneService(EntityService):
    def __init__(self, storage, max_limit: int = 100):
        super().__init__(storage, PHONES, max_limit)

    def get_by_number(self, phone: str):
        return self.session.query(Phone).filter(Phone.phone == phone).first()

    def list_by_owner(self, owner_code: str, module: Optional[Module] = None) -> List[Phone]:
        q = self.session.query(Phone).filter(Phone.owner_code == owner_code)
        if module is not None:
            q = q.filter(Phone.module == module)
        return q.order_by(Phone.created_at.desc(), Phone.id.asc()).all()

    def list_by_module(self, module: Module, query: Optional[Mapping[str, Any]] = None):
        return self.list(query, criteria=[Phone.module == module])


class UserPermissionService(EntityService):
    def __init__(self, storage, max_limit: int = 100):
        super().__init__(storage, USER_PERMISSIONS, max_limit)

    def list_by_role(self, role: Role, query: Optional[Mapping[str, Any]] = None):
        return self.list(query, criteria=[UserPermission.role == role])

    def list_by_menu(self, menu: Menu, query: Optional[Mapping[str, Any]] = None):
        return self.list(query, criteria=[UserPermission.menu == menu])

    def permissions_for(self, role: Role, menu: Menu) -> List[UserPermission]:
        """Every sub-menu permission of one role within one menu, ordered by sub-menu."""
        return (
            self.session.query(UserPermission)
            .filter(UserPermission.role == role, UserPermission.menu == menu)
            .order_by(UserPermission.sub_menu.asc())
            .all()
        )

    def bulk_create(self, items: Iterable[Mapping[str, Any]]) -> List[UserPermission]:
        """Create each permission in turn; combinations that already exist are skipped."""
        created = []
        skipped = 0
        for item in items:
            try:
                created.append(self.create(item))
            except ConflictError:
                skipped += 1
        logger.info("Bulk permission create: %d created, %d skipped", len(created), skipped)
        return created


def build_entity_services(storage, max_limit: int = 100) -> Dict[str, EntityService]:
    return {
        "banks": EntityService(storage, BANKS, max_limit),
        "branches": BranchService(storage, max_limit),
        "colors": EntityService(storage, COLORS, max_limit),
        "reimbursement_types": EntityService(storage, REIMBURSEMENT_TYPES, max_limit),
        "cek_giro_fail_statuses": EntityService(storage, CEK_GIRO_FAIL_STATUSES, max_limit),
        "phones": PhoneService(storage, max_limit),
        "user_permissions": UserPermissionService(storage, max_limit),
    }
