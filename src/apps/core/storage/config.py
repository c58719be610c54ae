"""
Backend selection.

The decision is made once from configuration values and kept in a
StorageConfig; the process-wide backend built from it is created on
first use and never changes afterwards (tests replace it explicitly).
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .base import StorageBackend

logger = logging.getLogger(__name__)

SQL = 'sql'
KEY_VALUE = 'kv'
FILE = 'file'


@dataclass(frozen=True)
class StorageConfig:
    """Which backend is authoritative and how to reach it."""
    backend: str
    database_alias: str = 'default'
    kv_url: str = ''
    kv_prefix: str = ''
    data_dir: Optional[Path] = None
    read_only: bool = False

    @classmethod
    def from_values(
        cls,
        database_url: str = '',
        kv_url: str = '',
        managed_host: bool = False,
        data_dir: Optional[str | Path] = None,
        kv_prefix: str = '',
        database_alias: str = 'default',
    ) -> 'StorageConfig':
        """
        Pick a backend in priority order: relational database, key-value
        store, then local files. On a managed host without either, the
        local files are read-only and every write fails.
        """
        data_dir = Path(data_dir) if data_dir else None

        if database_url:
            return cls(backend=SQL, database_alias=database_alias, data_dir=data_dir)
        if kv_url:
            return cls(backend=KEY_VALUE, kv_url=kv_url, kv_prefix=kv_prefix, data_dir=data_dir)
        return cls(backend=FILE, data_dir=data_dir, read_only=managed_host)

    @classmethod
    def from_settings(cls) -> 'StorageConfig':
        from django.conf import settings

        options = getattr(settings, 'STOREFRONT_STORAGE', {})
        return cls.from_values(
            database_url=options.get('DATABASE_URL', ''),
            kv_url=options.get('KV_URL', ''),
            managed_host=options.get('MANAGED_HOST', False),
            data_dir=options.get('DATA_DIR'),
            kv_prefix=options.get('KV_PREFIX', ''),
            database_alias=options.get('DATABASE_ALIAS', 'default'),
        )


def build_storage_backend(config: StorageConfig) -> StorageBackend:
    """
    Instantiate the backend described by a config.

    Returns:
        StorageBackend instance (SqlStorage, KeyValueStorage or LocalFileStorage)
    """
    if config.backend == SQL:
        from .sql import SqlStorage
        return SqlStorage(alias=config.database_alias)
    elif config.backend == KEY_VALUE:
        from .key_value import KeyValueStorage
        return KeyValueStorage(url=config.kv_url, prefix=config.kv_prefix)
    elif config.backend == FILE:
        from .local import LocalFileStorage
        if config.read_only:
            logger.warning('No database or key-value store configured on a managed host; storage is read-only')
        return LocalFileStorage(base_path=config.data_dir, read_only=config.read_only)
    else:
        raise ValueError(f'Unknown storage backend: {config.backend}')


_backend: Optional[StorageBackend] = None


def get_storage_backend() -> StorageBackend:
    """Return the process-wide backend, building it from settings on first use."""
    global _backend
    if _backend is None:
        config = StorageConfig.from_settings()
        _backend = build_storage_backend(config)
        logger.info(f'Using {config.backend} storage backend')
    return _backend


def set_storage_backend(backend: Optional[StorageBackend]) -> None:
    """Replace the process-wide backend (None rebuilds it from settings)."""
    global _backend
    _backend = backend
