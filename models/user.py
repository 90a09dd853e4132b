from models.base_model import Base, BaseModel
from models.enums import Role
from sqlalchemy import Column, Enum, Numeric, String
from sqlalchemy.orm import relationship


class User(BaseModel, Base):
    __tablename__ = "users"
    code = Column(String(10), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    username = Column(String(100), nullable=False, unique=True, index=True)
    phone = Column(String(50), nullable=False, unique=True)
    address = Column(String(500), nullable=True)
    # argon2 hash; never serialized
    password = Column(String(255), nullable=False)
    role = Column(Enum(Role, name="role"), nullable=False, default=Role.ANGGOTA)
    expense_limit = Column(Numeric(15, 2), nullable=False, default=0)
    discount_limit = Column(Numeric(15, 2), nullable=False, default=0)
    point = Column(Numeric(15, 2), nullable=False, default=0)
    balance = Column(Numeric(15, 2), nullable=False, default=0)

    refresh_tokens = relationship(
        "RefreshToken",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def token_claims(self):
        """Claims carried by every token issued for this user"""
        return {
            "userId": self.id,
            "email": self.email,
            "role": self.role.value,
            "code": self.code,
        }
