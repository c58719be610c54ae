"""
Storefront exception hierarchy.
"""


class StorefrontError(Exception):
    """Base class for errors raised by the storefront."""


class StorageNotConfigured(StorefrontError):
    """No writable storage backend is available in this environment."""

    def __init__(self, message: str = None):
        super().__init__(
            message or 'Storage not configured. Set DATABASE_URL or KV_URL environment variables.'
        )


class EntityNotFound(StorefrontError):
    """An update or delete targeted an id that does not exist."""

    def __init__(self, collection: str, entity_id: str):
        self.collection = collection
        self.entity_id = entity_id
        super().__init__(f'{collection} entry not found: {entity_id}')


class InvalidInput(StorefrontError, ValueError):
    """Input could not be normalized (bad price, unknown status, ...)."""
