"""
Shared logic for backends that keep each collection as one JSON array.
"""

import logging
from abc import abstractmethod
from typing import Optional

from apps.core.exceptions import EntityNotFound, StorageNotConfigured

from .base import StorageBackend
from .schema import Collection

logger = logging.getLogger(__name__)


class DocumentStorage(StorageBackend):
    """
    Base class for the flat-file and key-value backends.

    Every write reads the whole array, modifies it in memory and writes
    it back. There is no locking: concurrent writers race and the last
    write wins for the entire collection.
    """

    def __init__(self, read_only: bool = False):
        self.read_only = read_only

    @abstractmethod
    def _load(self, collection: Collection) -> Optional[list]:
        """Return the stored array, or None if nothing is stored yet."""
        pass

    @abstractmethod
    def _dump(self, collection: Collection, records: list[dict]) -> None:
        """Overwrite the stored array."""
        pass

    def ensure_writable(self) -> None:
        if self.read_only:
            raise StorageNotConfigured()

    def list_records(self, collection: Collection) -> list[dict]:
        try:
            records = self._load(collection)
        except Exception as e:
            logger.warning(f'Failed to read {collection.name} from {self.kind} storage: {e}')
            return []

        if not isinstance(records, list):
            return []
        return [r for r in records if isinstance(r, dict)]

    def insert(self, collection: Collection, record: dict) -> dict:
        self.ensure_writable()
        records = self.list_records(collection)
        records.append(record)
        self._dump(collection, records)
        logger.debug(f'Inserted {collection.name} {record.get("id")}')
        return record

    def replace(self, collection: Collection, record: dict) -> dict:
        self.ensure_writable()
        records = self.list_records(collection)
        for index, existing in enumerate(records):
            if existing.get('id') == record.get('id'):
                records[index] = record
                self._dump(collection, records)
                return record
        raise EntityNotFound(collection.name, record.get('id'))

    def patch(self, collection: Collection, record_id: str, changes: dict) -> Optional[dict]:
        self.ensure_writable()
        records = self.list_records(collection)
        for existing in records:
            if existing.get('id') == record_id:
                existing.update(changes)
                self._dump(collection, records)
                return existing
        return None

    def delete(self, collection: Collection, record_id: str) -> bool:
        self.ensure_writable()
        records = self.list_records(collection)
        remaining = [r for r in records if r.get('id') != record_id]
        if len(remaining) == len(records):
            return False
        self._dump(collection, remaining)
        logger.debug(f'Deleted {collection.name} {record_id}')
        return True
