"""
ORM models.

A storage slot is one named string value, the SQLite counterpart of a
browser storage entry. Lists are written as a whole JSON document.
"""

from sqlalchemy import String, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
from .db import Base


class StorageSlot(Base):
    __tablename__ = "storage_slots"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)

    # Serialized list, e.g.
    #   [{"name": "Paris", "weather": {...}, "forecast": [...]}, ...]
    value: Mapped[str] = mapped_column(Text)

    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
