"""
Catalog entities - products and the named lookups they reference.

Entities are plain dataclasses; storage backends only ever see the
record dicts produced by to_record().
"""
import math
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional

from django.db import models

from apps.core.exceptions import InvalidInput

PLACEHOLDER_IMAGE = 'https://placehold.co/400'


class ProductStatus(models.TextChoices):
    PUBLISHED = 'published', 'Published'
    ARCHIVED = 'archived', 'Archived'


def parse_price(value: Any, required: bool = True) -> Optional[float]:
    """
    Normalize a price to a float.

    Accepts numbers or numeric text ('1500.50', ' 12 '). Empty values
    are only allowed when the price is optional.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise InvalidInput('Price is required')
        return None

    if isinstance(value, bool):
        raise InvalidInput(f'Invalid price: {value!r}')

    try:
        if isinstance(value, (int, float, Decimal)):
            result = float(value)
        else:
            result = float(str(value).strip())
    except (ValueError, OverflowError):
        raise InvalidInput(f'Invalid price: {value!r}')

    if not math.isfinite(result):
        raise InvalidInput(f'Invalid price: {value!r}')
    return result


def normalize_tag_ids(tag_ids: Any = None, tag_id: Any = None) -> list[str]:
    """Merge tagIds (list or comma-separated text) and a single tagId into a unique list."""
    if isinstance(tag_ids, str):
        candidates = tag_ids.split(',')
    elif isinstance(tag_ids, (list, tuple, set)):
        candidates = list(tag_ids)
    elif tag_ids is None or isinstance(tag_ids, bool):
        candidates = []
    else:
        # A lone scalar id
        candidates = [tag_ids]

    if tag_id:
        candidates.append(tag_id)

    result = []
    for candidate in candidates:
        value = str(candidate).strip() if candidate is not None else ''
        if value and value not in result:
            result.append(value)
    return result


def _optional_ref(value: Any) -> Optional[str]:
    if value is None or value == '':
        return None
    return str(value)


@dataclass
class Product:
    id: str
    title: str
    price: float
    pcs_price: Optional[float] = None
    description: str = ''
    image: str = PLACEHOLDER_IMAGE
    supplier_id: Optional[str] = None
    tag_ids: list[str] = field(default_factory=list)
    category_id: Optional[str] = None
    status: str = ProductStatus.PUBLISHED.value

    @property
    def tag_id(self) -> Optional[str]:
        return self.tag_ids[0] if self.tag_ids else None

    @property
    def is_published(self) -> bool:
        return self.status != ProductStatus.ARCHIVED

    @classmethod
    def from_record(cls, data: dict) -> 'Product':
        """Build a product from stored or submitted camelCase data."""
        status = data.get('status') or ProductStatus.PUBLISHED.value
        if status not in ProductStatus.values:
            raise InvalidInput(f'Invalid status: {status!r}')

        return cls(
            id=str(data['id']),
            title=str(data.get('title') or ''),
            price=parse_price(data.get('price')),
            pcs_price=parse_price(data.get('pcsPrice'), required=False),
            description=data.get('description') or '',
            image=data.get('image') or PLACEHOLDER_IMAGE,
            supplier_id=_optional_ref(data.get('supplierId')),
            tag_ids=normalize_tag_ids(data.get('tagIds'), data.get('tagId')),
            category_id=_optional_ref(data.get('categoryId')),
            status=str(status),
        )

    def to_record(self) -> dict:
        return {
            'id': self.id,
            'title': self.title,
            'price': self.price,
            'pcsPrice': self.pcs_price,
            'description': self.description,
            'image': self.image,
            'supplierId': self.supplier_id,
            'tagId': self.tag_id,
            'tagIds': list(self.tag_ids),
            'categoryId': self.category_id,
            'status': self.status,
        }


@dataclass
class NamedEntity:
    """Supplier, tag or category: an id and a case-insensitively unique name."""
    id: str
    name: str

    @classmethod
    def from_record(cls, data: dict):
        return cls(id=str(data['id']), name=str(data.get('name') or ''))

    def to_record(self) -> dict:
        return {'id': self.id, 'name': self.name}

    def __str__(self):
        return self.name


class Supplier(NamedEntity):
    pass


class Tag(NamedEntity):
    pass


class Category(NamedEntity):
    pass


@dataclass
class Salesperson:
    id: str
    name: str
    phone: str = ''

    @classmethod
    def from_record(cls, data: dict) -> 'Salesperson':
        return cls(
            id=str(data['id']),
            name=str(data.get('name') or ''),
            phone=str(data.get('phone') or ''),
        )

    def to_record(self) -> dict:
        return {'id': self.id, 'name': self.name, 'phone': self.phone}

    def __str__(self):
        return f'{self.name} ({self.phone})' if self.phone else self.name
