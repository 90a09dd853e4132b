from sqlalchemy import Column, String

from models.base_model import BaseModel, Base


class CekGiroFailStatus(BaseModel, Base):
    __tablename__ = "cek_giro_fail_statuses"

    code = Column(String(7), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False, unique=True)
