"""Importing the package registers every model on Base.metadata."""
from models.base_model import Base, BaseModel, TimestampMixin, utcnow
from models.enums import Menu, Module, PriceType, Role, SubMenu
from models.user import User
from models.refresh_token import RefreshToken
from models.bank import Bank
from models.branch import Branch
from models.color import Color
from models.reimbursement_type import ReimbursementType
from models.cek_giro_fail_status import CekGiroFailStatus
from models.phone import Phone
from models.user_permission import UserPermission
from models.account_number import AccountNumber
from models.member import Member
from models.expense_category import ExpenseCategory
from models.product_detail import ProductDetail
from models.db_storage import DBStorage

__all__ = [
    "Base", "BaseModel", "TimestampMixin", "utcnow",
    "Menu", "Module", "PriceType", "Role", "SubMenu",
    "User", "RefreshToken",
    "Bank", "Branch", "Color", "ReimbursementType", "CekGiroFailStatus", "Phone", "UserPermission",
    "AccountNumber", "Member", "ExpenseCategory", "ProductDetail",
    "DBStorage",
]
