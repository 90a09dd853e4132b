from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class Bank(BaseModel, Base):
    __tablename__ = "banks"

    # always stored uppercase
    code = Column(String(3), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False, unique=True)

    account_numbers = relationship("AccountNumber", back_populates="bank", passive_deletes=True)
