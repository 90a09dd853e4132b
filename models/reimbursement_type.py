from sqlalchemy import Column, String

from models.base_model import BaseModel, Base


class ReimbursementType(BaseModel, Base):
    __tablename__ = "reimbursement_types"

    code = Column(String(7), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False, unique=True)
