"""Role sets guarding each group of routes."""
from models.enums import Role

ADMINS = frozenset({Role.SUPER_ADMIN, Role.OWNER, Role.PIMPINAN})
MANAGERS = ADMINS | {Role.HEAD_KANTOR}
READERS = MANAGERS | {Role.STAFF_KANTOR, Role.ANGGOTA}
WAREHOUSE_READERS = READERS | {Role.STAFF_INVENTORY, Role.STAFF_WAREHOUSE}
PERMISSION_ADMINS = frozenset({Role.SUPER_ADMIN, Role.OWNER})
USER_MANAGERS = MANAGERS | {Role.ANGGOTA}
