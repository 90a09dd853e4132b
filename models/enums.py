"""Closed value sets stored in enum columns and accepted at the HTTP boundary."""
from enum import Enum


class Role(str, Enum):
    ANGGOTA = "ANGGOTA"
    HEAD_KANTOR = "HEAD_KANTOR"
    KASIR = "KASIR"
    OWNER = "OWNER"
    PIMPINAN = "PIMPINAN"
    SALES = "SALES"
    STAFF_KANTOR = "STAFF_KANTOR"
    STAFF_INVENTORY = "STAFF_INVENTORY"
    STAFF_WAREHOUSE = "STAFF_WAREHOUSE"
    SUPER_ADMIN = "SUPER_ADMIN"


ADMIN_ROLES = (Role.SUPER_ADMIN, Role.OWNER, Role.PIMPINAN)
STAFF_ROLES = (Role.STAFF_KANTOR, Role.STAFF_INVENTORY, Role.STAFF_WAREHOUSE)


class PriceType(str, Enum):
    ECER = "ECER"
    GROSIR = "GROSIR"


class Module(str, Enum):
    """Owner kind of a phone number."""
    USER = "USER"
    BRANCH = "BRANCH"
    MEMBER = "MEMBER"
    SUPPLIER = "SUPPLIER"
    SALES = "SALES"


class Menu(str, Enum):
    MASTER = "MASTER"
    INVENTORY = "INVENTORY"
    SALES = "SALES"
    PURCHASE = "PURCHASE"
    FINANCE = "FINANCE"
    REPORT = "REPORT"
    SETTING = "SETTING"


class SubMenu(str, Enum):
    BANK = "BANK"
    BRANCH = "BRANCH"
    COLOR = "COLOR"
    PHONE = "PHONE"
    REIMBURSEMENT_TYPE = "REIMBURSEMENT_TYPE"
    CEK_GIRO_FAIL_STATUS = "CEK_GIRO_FAIL_STATUS"
    USER = "USER"
    USER_PERMISSION = "USER_PERMISSION"
    PRODUCT = "PRODUCT"
    ORDER = "ORDER"
    RESTOCK = "RESTOCK"
    PAYMENT = "PAYMENT"
