"""
Base storage abstraction for entity collections.
"""

from abc import ABC, abstractmethod
from typing import Optional

from .schema import Collection


class StorageBackend(ABC):
    """
    Abstract base class for storage backends.

    A backend persists whole entity records (plain dicts) grouped into
    collections. Implementations must provide listing, inserting,
    replacing, patching and deleting records by id.
    """

    #: Short backend identifier ('file', 'kv', 'sql')
    kind = ''

    @abstractmethod
    def list_records(self, collection: Collection) -> list[dict]:
        """
        Return all records of a collection.

        Never raises for a missing or unreadable store; an empty list
        is returned instead.
        """
        pass

    @abstractmethod
    def insert(self, collection: Collection, record: dict) -> dict:
        """
        Persist a new record.

        Returns:
            The record as stored
        """
        pass

    @abstractmethod
    def replace(self, collection: Collection, record: dict) -> dict:
        """
        Replace a record keyed by its id.

        Raises:
            EntityNotFound: If no record has that id
        """
        pass

    @abstractmethod
    def patch(self, collection: Collection, record_id: str, changes: dict) -> Optional[dict]:
        """
        Update only the given fields of a record.

        Returns:
            The updated record, or None if no record has that id
        """
        pass

    @abstractmethod
    def delete(self, collection: Collection, record_id: str) -> bool:
        """
        Delete a record.

        Returns:
            True if deleted, False if not found
        """
        pass

    @abstractmethod
    def check(self) -> None:
        """Raise if the backend cannot currently be reached."""
        pass

    def ensure_writable(self) -> None:
        """Raise StorageNotConfigured if this backend rejects writes."""
        pass

    def get(self, collection: Collection, record_id: str) -> Optional[dict]:
        """Look up a single record by id."""
        for record in self.list_records(collection):
            if record.get('id') == record_id:
                return record
        return None

    def __repr__(self):
        return f'<{self.__class__.__name__} kind={self.kind}>'
