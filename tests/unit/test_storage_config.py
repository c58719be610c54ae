"""
Unit tests for backend selection.
"""
from unittest import mock

import pytest

from apps.core.storage import (
    KeyValueStorage,
    LocalFileStorage,
    SqlStorage,
    StorageConfig,
    build_storage_backend,
    config as storage_config,
)


class TestStorageConfig:
    """Tests for StorageConfig.from_values()."""

    def test_database_url_wins(self):
        config = StorageConfig.from_values(database_url='postgres://db/x', kv_url='redis://kv')
        assert config.backend == 'sql'
        assert not config.read_only

    def test_kv_when_no_database(self):
        config = StorageConfig.from_values(kv_url='rediss://default:token@kv:6379', kv_prefix='shop:')
        assert config.backend == 'kv'
        assert config.kv_url == 'rediss://default:token@kv:6379'
        assert config.kv_prefix == 'shop:'

    def test_file_fallback(self, tmp_path):
        config = StorageConfig.from_values(data_dir=str(tmp_path))
        assert config.backend == 'file'
        assert config.data_dir == tmp_path
        assert not config.read_only

    def test_managed_host_without_backend_is_read_only(self):
        config = StorageConfig.from_values(managed_host=True)
        assert config.backend == 'file'
        assert config.read_only

    def test_managed_host_with_kv(self):
        config = StorageConfig.from_values(kv_url='redis://kv', managed_host=True)
        assert config.backend == 'kv'
        assert not config.read_only

    def test_from_settings(self, settings, tmp_path):
        settings.STOREFRONT_STORAGE = {
            'DATABASE_URL': '',
            'KV_URL': '',
            'MANAGED_HOST': True,
            'DATA_DIR': tmp_path,
        }
        config = StorageConfig.from_settings()
        assert config.backend == 'file'
        assert config.read_only
        assert config.data_dir == tmp_path


class TestBuildStorageBackend:
    """Tests for build_storage_backend()."""

    def test_sql(self):
        backend = build_storage_backend(StorageConfig(backend='sql'))
        assert isinstance(backend, SqlStorage)
        assert backend.alias == 'default'

    def test_file(self, tmp_path):
        backend = build_storage_backend(StorageConfig(backend='file', data_dir=tmp_path, read_only=True))
        assert isinstance(backend, LocalFileStorage)
        assert backend.base_path == tmp_path
        assert backend.read_only

    def test_kv(self):
        with mock.patch('apps.core.storage.key_value.redis.Redis.from_url') as from_url:
            backend = build_storage_backend(StorageConfig(backend='kv', kv_url='redis://kv:6379/0'))

        assert isinstance(backend, KeyValueStorage)
        from_url.assert_called_once_with('redis://kv:6379/0', decode_responses=True)

    def test_unknown(self):
        with pytest.raises(ValueError):
            build_storage_backend(StorageConfig(backend='ftp'))


class TestProcessBackend:
    """The process-wide backend is built once and can be replaced."""

    def test_built_once(self, settings, tmp_path):
        settings.STOREFRONT_STORAGE = {'DATA_DIR': tmp_path}
        storage_config.set_storage_backend(None)
        try:
            first = storage_config.get_storage_backend()
            assert isinstance(first, LocalFileStorage)
            assert storage_config.get_storage_backend() is first
        finally:
            storage_config.set_storage_backend(None)

    def test_injected(self, tmp_path):
        backend = LocalFileStorage(base_path=tmp_path)
        storage_config.set_storage_backend(backend)
        try:
            assert storage_config.get_storage_backend() is backend
        finally:
            storage_config.set_storage_backend(None)
