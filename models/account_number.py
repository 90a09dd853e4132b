from sqlalchemy import Column, ForeignKey, String
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class AccountNumber(BaseModel, Base):
    __tablename__ = "account_numbers"

    number = Column(String(50), nullable=False, unique=True)
    holder_name = Column(String(255), nullable=True)
    # Bank: RESTRICT deletion while account numbers reference it
    bank_code = Column(String(3), ForeignKey("banks.code", ondelete="RESTRICT", onupdate="CASCADE"),
                       nullable=False, index=True)

    bank = relationship("Bank", back_populates="account_numbers")
