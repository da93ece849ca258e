"""
Persisted record lists (History, Favorites).

Each list owns one storage slot. Mutations build a new tuple, write the whole
list to the slot, and only then replace the in-memory copy, so a failed write
leaves memory matching what is stored.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from pydantic import TypeAdapter, ValidationError

from .errors import MalformedStorageError
from .schemas import WeatherRecord
from .storage import KeyValueStore

logger = logging.getLogger(__name__)

Records = Tuple[WeatherRecord, ...]

_records_adapter = TypeAdapter(List[WeatherRecord])


class PersistentList:
    """
    Ordered list of WeatherRecords kept in `store` under `key`.

    `max_items=None` means unbounded (Favorites); History passes its cap.
    Names are not unique: prepend never deduplicates, remove_by drops every
    match.
    """

    def __init__(self, store: KeyValueStore, key: str, max_items: Optional[int] = None):
        self.store = store
        self.key = key
        self.max_items = max_items
        self._items: Records = ()

    @property
    def items(self) -> Records:
        return self._items

    def __len__(self) -> int:
        return len(self._items)

    def load(self) -> Records:
        """Read the slot. Missing or malformed data loads as an empty list."""
        raw = self.store.get(self.key)
        if raw is None:
            self._items = ()
            return self._items

        try:
            self._items = self._decode(raw)
        except MalformedStorageError as e:
            logger.warning("%s; starting with an empty list", e)
            self._items = ()
        return self._items

    def prepend(self, record: WeatherRecord) -> Records:
        updated = (record,) + self._items
        if self.max_items is not None:
            updated = updated[: self.max_items]
        return self._commit(updated)

    def remove_by(self, name: str) -> Records:
        return self._commit(tuple(r for r in self._items if r.name != name))

    def find(self, name: str) -> Optional[WeatherRecord]:
        """First record with exactly this name, if any."""
        return next((r for r in self._items if r.name == name), None)

    def persist(self, records: Records) -> None:
        payload = _records_adapter.dump_json(list(records)).decode("utf-8")
        self.store.set(self.key, payload)

    def _commit(self, updated: Records) -> Records:
        self.persist(updated)
        self._items = updated
        return self._items

    def _decode(self, raw: str) -> Records:
        try:
            return tuple(_records_adapter.validate_json(raw))
        except ValidationError as e:
            raise MalformedStorageError(self.key, f"{e.error_count()} validation error(s)") from e
