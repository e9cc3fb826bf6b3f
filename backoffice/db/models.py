"""SQLAlchemy model mirroring the per-entity JSON documents."""
from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, JSON, String, func

from .session import Base


class Record(Base):
    """One entity record; `data` holds the same dict the JSON backend stores."""

    __tablename__ = "records"

    entity = Column(String(32), primary_key=True)
    record_id = Column(Integer, primary_key=True, autoincrement=False)
    data = Column(JSON, nullable=False, default=dict)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
