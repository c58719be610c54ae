"""
Pytest configuration and fixtures.
"""
import os
import sys

import django
import pytest

# Add src to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')
django.setup()

from apps.core.storage import KeyValueStorage, LocalFileStorage, SqlStorage, set_storage_backend  # noqa: E402


class FakeRedis:
    """In-memory stand-in for the redis client (get/set/ping only)."""

    def __init__(self):
        self.data = {}
        self.fail_reads = False

    def get(self, key):
        if self.fail_reads:
            raise ConnectionError('redis unavailable')
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value
        return True

    def ping(self):
        return True


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def file_storage(tmp_path):
    return LocalFileStorage(base_path=tmp_path)


@pytest.fixture
def kv_storage(fake_redis):
    return KeyValueStorage(client=fake_redis, prefix='test:')


@pytest.fixture
def sql_storage(db):
    return SqlStorage()


@pytest.fixture(params=['file', 'kv', 'sql'])
def storage(request):
    """Run a test once against every backend."""
    return request.getfixturevalue(f'{request.param}_storage')


@pytest.fixture
def api_storage(tmp_path):
    """Install a file backend as the process backend for API tests."""
    backend = LocalFileStorage(base_path=tmp_path)
    set_storage_backend(backend)
    yield backend
    set_storage_backend(None)
