"""
Relational storage backend on top of Django's database connections.

Tables are created implicitly on first use of each collection and
missing columns are added (additive-only, existing columns are never
altered or dropped).
"""

import logging
from typing import Optional

from django.db import DatabaseError, connections

from apps.core.exceptions import EntityNotFound

from .base import StorageBackend
from .schema import REAL, Collection, Column

logger = logging.getLogger(__name__)


class SqlStorage(StorageBackend):
    """
    SQL storage backend.
    Works with any database Django supports (SQLite, PostgreSQL, ...).
    """

    kind = 'sql'

    SQL_TYPES = {
        REAL: 'DOUBLE PRECISION',
    }

    def __init__(self, alias: str = 'default'):
        """
        Args:
            alias: Key of settings.DATABASES to use
        """
        self.alias = alias
        self._ready: set[str] = set()

    @property
    def connection(self):
        return connections[self.alias]

    def _qn(self, name: str) -> str:
        return self.connection.ops.quote_name(name)

    def _column_sql(self, column: Column) -> str:
        sql = f'{self._qn(column.name)} {self.SQL_TYPES.get(column.kind, "TEXT")}'
        if column.primary_key:
            sql += ' PRIMARY KEY'
        if column.default is not None:
            sql += f" DEFAULT '{column.default}'"
        return sql

    def ensure_schema(self, collection: Collection) -> None:
        """
        Create the collection's table or add its missing columns.

        Runs once per collection for this backend instance. The step is
        idempotent, so a failed attempt is simply retried on the next call.
        """
        if collection.name in self._ready:
            return

        connection = self.connection
        table = self._qn(collection.table)

        with connection.cursor() as cursor:
            existing_tables = connection.introspection.table_names(cursor)

            if collection.table not in existing_tables:
                columns_sql = ', '.join(self._column_sql(c) for c in collection.columns)
                cursor.execute(f'CREATE TABLE IF NOT EXISTS {table} ({columns_sql})')
                logger.info(f'Created table {collection.table}')
            else:
                present = {
                    info.name
                    for info in connection.introspection.get_table_description(cursor, collection.table)
                }
                for column in collection.columns:
                    if column.name not in present:
                        cursor.execute(f'ALTER TABLE {table} ADD COLUMN {self._column_sql(column)}')
                        logger.info(f'Added column {collection.table}.{column.name}')

        self._ready.add(collection.name)

    def _row_to_record(self, collection: Collection, row) -> dict:
        return {
            column.field: column.from_db(value)
            for column, value in zip(collection.columns, row)
        }

    def _select_sql(self, collection: Collection) -> str:
        names = ', '.join(self._qn(c.name) for c in collection.columns)
        return f'SELECT {names} FROM {self._qn(collection.table)}'

    def list_records(self, collection: Collection) -> list[dict]:
        order_column = collection.column(collection.order_by).name
        try:
            self.ensure_schema(collection)
            with self.connection.cursor() as cursor:
                cursor.execute(f'{self._select_sql(collection)} ORDER BY {self._qn(order_column)}')
                rows = cursor.fetchall()
        except DatabaseError as e:
            logger.warning(f'Failed to read {collection.name} from sql storage: {e}')
            return []

        return [self._row_to_record(collection, row) for row in rows]

    def get(self, collection: Collection, record_id: str) -> Optional[dict]:
        self.ensure_schema(collection)
        with self.connection.cursor() as cursor:
            cursor.execute(f'{self._select_sql(collection)} WHERE {self._qn("id")} = %s', [record_id])
            row = cursor.fetchone()
        return self._row_to_record(collection, row) if row else None

    def insert(self, collection: Collection, record: dict) -> dict:
        self.ensure_schema(collection)
        names = ', '.join(self._qn(c.name) for c in collection.columns)
        placeholders = ', '.join(['%s'] * len(collection.columns))
        values = [c.to_db(record.get(c.field)) for c in collection.columns]

        with self.connection.cursor() as cursor:
            cursor.execute(
                f'INSERT INTO {self._qn(collection.table)} ({names}) VALUES ({placeholders})',
                values,
            )
        logger.debug(f'Inserted {collection.name} {record.get("id")}')
        return record

    def _update(self, collection: Collection, record_id: str, changes: dict) -> int:
        columns = [collection.column(name) for name in changes]
        assignments = ', '.join(f'{self._qn(c.name)} = %s' for c in columns)
        values = [c.to_db(changes[c.field]) for c in columns]

        with self.connection.cursor() as cursor:
            cursor.execute(
                f'UPDATE {self._qn(collection.table)} SET {assignments} WHERE {self._qn("id")} = %s',
                values + [record_id],
            )
            return cursor.rowcount

    def replace(self, collection: Collection, record: dict) -> dict:
        self.ensure_schema(collection)
        record_id = record.get('id')
        changes = {c.field: record.get(c.field) for c in collection.columns if not c.primary_key}

        if self._update(collection, record_id, changes) == 0:
            raise EntityNotFound(collection.name, record_id)
        return record

    def patch(self, collection: Collection, record_id: str, changes: dict) -> Optional[dict]:
        self.ensure_schema(collection)
        if self._update(collection, record_id, changes) == 0:
            return None
        return self.get(collection, record_id)

    def delete(self, collection: Collection, record_id: str) -> bool:
        self.ensure_schema(collection)
        with self.connection.cursor() as cursor:
            cursor.execute(
                f'DELETE FROM {self._qn(collection.table)} WHERE {self._qn("id")} = %s',
                [record_id],
            )
            deleted = cursor.rowcount > 0

        if deleted:
            logger.debug(f'Deleted {collection.name} {record_id}')
        return deleted

    def check(self) -> None:
        with self.connection.cursor() as cursor:
            cursor.execute('SELECT 1')
