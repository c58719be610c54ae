"""
Redis-backed key-value storage (works with managed Redis-protocol KV stores).
"""

import json
import logging
from typing import Optional

import redis

from .document import DocumentStorage
from .schema import Collection

logger = logging.getLogger(__name__)


class KeyValueStorage(DocumentStorage):
    """
    Key-value storage backend.

    Each collection is stored under a single key whose value is the
    entire JSON array.
    """

    kind = 'kv'

    def __init__(
        self,
        url: Optional[str] = None,
        prefix: str = '',
        client=None,
        read_only: bool = False,
    ):
        """
        Initialize key-value storage.

        Args:
            url: Redis URL (redis:// or rediss://, credentials included)
            prefix: Prefix prepended to every collection key
            client: Pre-built client exposing get/set/ping (used in tests)
            read_only: Reject writes
        """
        super().__init__(read_only=read_only)
        if client is None:
            if not url:
                raise ValueError('Key-value storage requires a URL or a client')
            client = redis.Redis.from_url(url, decode_responses=True)
        self.client = client
        self.prefix = prefix
        logger.debug(f'Key-value storage ready (prefix={prefix!r})')

    def key_for(self, collection: Collection) -> str:
        return f'{self.prefix}{collection.name}'

    def _load(self, collection: Collection) -> Optional[list]:
        raw = self.client.get(self.key_for(collection))
        if raw is None:
            return None
        return json.loads(raw)

    def _dump(self, collection: Collection, records: list[dict]) -> None:
        self.client.set(self.key_for(collection), json.dumps(records, ensure_ascii=False))

    def check(self) -> None:
        self.client.ping()
