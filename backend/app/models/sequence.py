"""SQLAlchemy model for named counters reserved atomically."""
from __future__ import annotations

from sqlalchemy import Column, Integer, String

from app.core.db import Base


class Sequence(Base):
    __tablename__ = "sequences"

    name = Column(String(64), primary_key=True)
    value = Column(Integer, nullable=False, default=0)
