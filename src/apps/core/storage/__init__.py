"""
Storage abstraction for the storefront.
Provides one interface over local JSON files, a key-value store and SQL.
"""

from .base import StorageBackend
from .config import (
    StorageConfig,
    build_storage_backend,
    get_storage_backend,
    set_storage_backend,
)
from .document import DocumentStorage
from .key_value import KeyValueStorage
from .local import LocalFileStorage
from .sql import SqlStorage

__all__ = [
    'StorageBackend',
    'StorageConfig',
    'DocumentStorage',
    'LocalFileStorage',
    'KeyValueStorage',
    'SqlStorage',
    'build_storage_backend',
    'get_storage_backend',
    'set_storage_backend',
]
