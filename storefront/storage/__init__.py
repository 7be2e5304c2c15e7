"""
Storage abstractions.

- MetadataStorage → the document database (users, orders, categories)
"""

from storefront.storage.base import (
    MetadataStorage,
    Collections,
)
from storefront.storage.local import InMemoryMetadataStorage, create_local_storage

__all__ = [
    "MetadataStorage",
    "Collections",
    "InMemoryMetadataStorage",
    "create_local_storage",
]
