from sqlalchemy import CheckConstraint, Column, Enum, Numeric, String
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base
from models.enums import PriceType


class Branch(BaseModel, Base):
    __tablename__ = "branches"

    code = Column(String(3), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False, unique=True)
    address = Column(String(255), nullable=False, unique=True)
    phone = Column(String(50), nullable=True)
    price_type = Column(Enum(PriceType, name="price_type"), nullable=False, default=PriceType.ECER, index=True)
    img = Column(String(500), nullable=True)
    # depreciation rates for years one to four
    depreciation_year_1 = Column(Numeric(5, 2), nullable=True)
    depreciation_year_2 = Column(Numeric(5, 2), nullable=True)
    depreciation_year_3 = Column(Numeric(5, 2), nullable=True)
    depreciation_year_4 = Column(Numeric(5, 2), nullable=True)

    members = relationship("Member", back_populates="branch", passive_deletes=True)
    expense_categories = relationship("ExpenseCategory", back_populates="branch", passive_deletes=True)

    __table_args__ = (
        CheckConstraint(
            "(depreciation_year_1 IS NULL OR depreciation_year_1 >= 0) AND "
            "(depreciation_year_2 IS NULL OR depreciation_year_2 >= 0) AND "
            "(depreciation_year_3 IS NULL OR depreciation_year_3 >= 0) AND "
            "(depreciation_year_4 IS NULL OR depreciation_year_4 >= 0)",
            name="ck_branches_depreciation_nonnegative",
        ),
    )
