"""
RefreshToken model: one row per issued refresh token so tokens can be rotated and revoked
Fields:
- id (String(36)) - the jti claim of the stored token
- hashed_token - argon2 hash of the full token string
- user_id (Integer) - FK to users.id
- revoked (bool)
- created_at, updated_at
"""
from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from models.base_model import Base, TimestampMixin


class RefreshToken(TimestampMixin, Base):
    __tablename__ = "refresh_tokens"

    id = Column(String(36), primary_key=True)
    hashed_token = Column(Text, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    revoked = Column(Boolean, default=False, nullable=False, index=True)

    user = relationship("User", back_populates="refresh_tokens")

    def __repr__(self):
        return f"<RefreshToken id={self.id} user_id={self.user_id} revoked={self.revoked}>"
