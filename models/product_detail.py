from sqlalchemy import Column, ForeignKey, String
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class ProductDetail(BaseModel, Base):
    __tablename__ = "product_details"

    sku = Column(String(50), nullable=False, unique=True)
    color_code = Column(String(7), ForeignKey("colors.code", ondelete="RESTRICT", onupdate="CASCADE"),
                        nullable=True, index=True)

    color = relationship("Color", back_populates="product_details")
