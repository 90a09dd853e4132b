from sqlalchemy import Boolean, Column, Enum, UniqueConstraint

from models.base_model import BaseModel, Base
from models.enums import Menu, Role, SubMenu


class UserPermission(BaseModel, Base):
    __tablename__ = "user_permissions"

    role = Column(Enum(Role, name="role"), nullable=False, index=True)
    menu = Column(Enum(Menu, name="menu"), nullable=False)
    sub_menu = Column(Enum(SubMenu, name="sub_menu"), nullable=False)
    view = Column(Boolean, nullable=False, default=False)
    create = Column(Boolean, nullable=False, default=False)
    update = Column(Boolean, nullable=False, default=False)
    delete = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint("role", "menu", "sub_menu", name="uq_user_permissions_role_menu_sub_menu"),
    )
