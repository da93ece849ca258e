"""
Key-value stores.

The persistent lists only need get/set on string slots. SqlKeyValueStore keeps
them in SQLite; InMemoryKeyValueStore keeps them for the life of the process.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, Optional, Protocol

from sqlalchemy.orm import sessionmaker

from . import models

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class SqlKeyValueStore:
    """One session per call; every set commits before returning."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def get(self, key: str) -> Optional[str]:
        with self.session_factory() as db:
            slot = db.get(models.StorageSlot, key)
            return slot.value if slot is not None else None

    def set(self, key: str, value: str) -> None:
        with self.session_factory() as db:
            slot = db.get(models.StorageSlot, key)
            if slot is None:
                slot = models.StorageSlot(key=key, value=value)
            else:
                slot.value = value
            slot.updated_at = datetime.utcnow()
            db.add(slot)
            db.commit()
        logger.debug("Wrote storage slot %s (%d bytes)", key, len(value))


class InMemoryKeyValueStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value
