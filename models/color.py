from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class Color(BaseModel, Base):
    __tablename__ = "colors"

    # "#RRGGBB", uppercase
    code = Column(String(7), nullable=False, unique=True, index=True)
    name = Column(String(100), nullable=False, unique=True)

    product_details = relationship("ProductDetail", back_populates="color", passive_deletes=True)
