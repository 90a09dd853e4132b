from sqlalchemy import Column, ForeignKey, String
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class Member(BaseModel, Base):
    __tablename__ = "members"

    code = Column(String(10), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    branch_code = Column(String(3), ForeignKey("branches.code", ondelete="RESTRICT", onupdate="CASCADE"),
                         nullable=False, index=True)

    branch = relationship("Branch", back_populates="members")
