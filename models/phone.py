from sqlalchemy import Column, Enum, Index, String

from models.base_model import BaseModel, Base
from models.enums import Module


class Phone(BaseModel, Base):
    """A phone number owned by a user, branch, member... identified by (module, owner_code)."""
    __tablename__ = "phones"

    phone = Column(String(50), nullable=False, unique=True)
    module = Column(Enum(Module, name="module"), nullable=False)
    owner_code = Column(String(50), nullable=False)

    __table_args__ = (
        Index("ix_phones_module_owner_code", "module", "owner_code"),
    )
