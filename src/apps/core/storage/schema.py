"""
Collection descriptors shared by all storage backends.

A collection maps entity records (JSON dicts with camelCase keys) onto
a JSON file, a key-value entry and a SQL table.
"""

from dataclasses import dataclass, field
from typing import Any, Optional


TEXT = 'text'
REAL = 'real'
TEXT_LIST = 'text_list'


@dataclass(frozen=True)
class Column:
    """A single persisted field."""
    field: str
    name: str
    kind: str = TEXT
    default: Optional[str] = None
    primary_key: bool = False

    def to_db(self, value: Any) -> Any:
        if self.kind == TEXT_LIST:
            values = [str(v) for v in (value or []) if v]
            return ','.join(values) if values else None
        return value

    def from_db(self, value: Any) -> Any:
        if self.kind == TEXT_LIST:
            if not value:
                return []
            return [v for v in str(value).split(',') if v]
        if self.kind == REAL and value is not None:
            return float(value)
        return value


@dataclass(frozen=True)
class Collection:
    """
    Descriptor for one entity type.

    Attributes:
        name: Collection name, used as the JSON file stem and KV key
        table: SQL table name
        columns: Persisted columns, the first one is the primary key
        order_by: Field the relational backend sorts by
        unique_fields: Fields checked case-insensitively for duplicates
    """
    name: str
    table: str
    columns: tuple
    order_by: str = 'name'
    unique_fields: tuple = field(default_factory=tuple)

    def column(self, field_name: str) -> Column:
        for column in self.columns:
            if column.field == field_name:
                return column
        raise KeyError(f'{self.name} has no field {field_name!r}')


def _id_column() -> Column:
    return Column('id', 'id', primary_key=True)


PRODUCTS = Collection(
    name='products',
    table='products',
    columns=(
        _id_column(),
        Column('title', 'title'),
        Column('price', 'price', kind=REAL),
        Column('pcsPrice', 'price_pcs', kind=REAL),
        Column('description', 'description'),
        Column('image', 'image'),
        Column('supplierId', 'supplier_id'),
        Column('tagIds', 'tag_id', kind=TEXT_LIST),
        Column('categoryId', 'category_id'),
        Column('status', 'status', default='published'),
    ),
    order_by='title',
)

SUPPLIERS = Collection(
    name='suppliers',
    table='suppliers',
    columns=(_id_column(), Column('name', 'name')),
    unique_fields=('name',),
)

TAGS = Collection(
    name='tags',
    table='tags',
    columns=(_id_column(), Column('name', 'name')),
    unique_fields=('name',),
)

CATEGORIES = Collection(
    name='categories',
    table='categories',
    columns=(_id_column(), Column('name', 'name')),
    unique_fields=('name',),
)

SALESPEOPLE = Collection(
    name='salespeople',
    table='salespeople',
    columns=(_id_column(), Column('name', 'name'), Column('phone', 'phone')),
    unique_fields=('name', 'phone'),
)

ALL_COLLECTIONS = (PRODUCTS, SUPPLIERS, TAGS, CATEGORIES, SALESPEOPLE)
