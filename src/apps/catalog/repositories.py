"""
Entity repositories.

Each repository is bound to one storage backend and one collection and
exposes the same get-all / add / update / delete contract whichever
backend is active.
"""
import logging
import uuid
from typing import Optional

from apps.core.exceptions import EntityNotFound, InvalidInput
from apps.core.storage import StorageBackend
from apps.core.storage.schema import (
    CATEGORIES,
    PRODUCTS,
    SALESPEOPLE,
    SUPPLIERS,
    TAGS,
    Collection,
)

from .entities import Category, Product, ProductStatus, Salesperson, Supplier, Tag

logger = logging.getLogger(__name__)


def generate_id() -> str:
    return str(uuid.uuid4())


def _normalize_name(value) -> str:
    return str(value or '').strip().casefold()


class Repository:
    """Backend-agnostic access to one entity collection."""

    collection: Collection = None
    entity_class = None

    def __init__(self, storage: StorageBackend):
        self.storage = storage

    def _to_entity(self, record: dict):
        return self.entity_class.from_record(record)

    def get_all(self) -> list:
        """Return every stored entity; an unreadable store yields an empty list."""
        entities = []
        for record in self.storage.list_records(self.collection):
            try:
                entities.append(self._to_entity(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f'Skipping malformed {self.collection.name} record {record!r}: {e}')
        return entities

    def get(self, entity_id: str):
        record = self.storage.get(self.collection, entity_id)
        return self._to_entity(record) if record else None

    def update(self, data: dict):
        """
        Replace an existing entity (full replace keyed by id).

        Raises:
            EntityNotFound: If no entity has that id
        """
        if not data.get('id'):
            raise InvalidInput(f'{self.collection.name} id is required')

        entity = self._to_entity(data)
        self.storage.replace(self.collection, entity.to_record())
        return entity

    def delete(self, entity_id: str) -> bool:
        """Returns True if an entity was removed."""
        return self.storage.delete(self.collection, entity_id)


class ProductRepository(Repository):
    collection = PRODUCTS
    entity_class = Product

    def add(self, data: dict) -> Product:
        """Create a product with a fresh id; status defaults to published."""
        product = Product.from_record({**data, 'id': generate_id()})
        self.storage.insert(self.collection, product.to_record())
        logger.info(f'Added product {product.id}: {product.title}')
        return product

    def update(self, data: dict) -> Product:
        self.storage.ensure_writable()
        if data.get('id') and not data.get('status'):
            current = self.get(data['id'])
            if current is None:
                raise EntityNotFound(self.collection.name, data['id'])
            data = {**data, 'status': current.status}

        return super().update(data)

    def set_status(self, product_id: str, status: str) -> Optional[Product]:
        """
        Change only the status of a product.

        Returns:
            The updated product, or None if it does not exist
        """
        if status not in ProductStatus.values:
            raise InvalidInput(f'Invalid status: {status!r}')

        record = self.storage.patch(self.collection, product_id, {'status': status})
        if record is None:
            return None
        logger.info(f'Product {product_id} is now {status}')
        return self._to_entity(record)


class UniqueNameRepository(Repository):
    """
    Repository for entities whose names are unique case-insensitively.

    Adding a duplicate writes nothing and returns the entity already stored.
    """

    def find_duplicate(self, candidate: dict):
        for entity in self.get_all():
            existing = entity.to_record()
            for field_name in self.collection.unique_fields:
                value = _normalize_name(candidate.get(field_name))
                if value and value == _normalize_name(existing.get(field_name)):
                    return entity
        return None

    def _add_record(self, record: dict):
        duplicate = self.find_duplicate(record)
        if duplicate is not None:
            logger.info(f'{self.collection.name} entry already exists: {duplicate}')
            return duplicate

        entity = self._to_entity({**record, 'id': generate_id()})
        self.storage.insert(self.collection, entity.to_record())
        logger.info(f'Added {self.collection.name} entry {entity.id}: {entity}')
        return entity

    def add(self, name: str):
        name = str(name or '').strip()
        if not name:
            raise InvalidInput('Name is required')
        return self._add_record({'name': name})


class SupplierRepository(UniqueNameRepository):
    collection = SUPPLIERS
    entity_class = Supplier


class TagRepository(UniqueNameRepository):
    collection = TAGS
    entity_class = Tag


class CategoryRepository(UniqueNameRepository):
    collection = CATEGORIES
    entity_class = Category


class SalespersonRepository(UniqueNameRepository):
    collection = SALESPEOPLE
    entity_class = Salesperson

    def add(self, name: str, phone: str = ''):
        name = str(name or '').strip()
        if not name:
            raise InvalidInput('Name is required')
        return self._add_record({'name': name, 'phone': str(phone or '').strip()})
