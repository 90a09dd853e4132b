#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixins for the POS & warehouse API.

- Integer surrogate primary key
- created_at / updated_at timestamps (naive UTC, set on the Python side so
  every backend stores comparable values)

Persistence goes through an explicitly constructed DBStorage handed to the
services; models carry no reference to a global session.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.orm import declarative_base

# Declarative base for all models
Base = declarative_base()


def utcnow() -> datetime:
    """Current UTC time without tzinfo, the form stored in every DateTime column."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TimestampMixin:
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class BaseModel(TimestampMixin):
    """
    Base mixin for the integer-keyed models.
    Subclasses list it before Base: class Bank(BaseModel, Base): ...
    """

    id = Column(Integer, primary_key=True, autoincrement=True)

    def __init__(self, *args, **kwargs):
        """Allow attribute initialization via kwargs without requiring a session here."""
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self.id}>"
