"""
Storage abstractions.

- ContentStorage  -> uploaded images and videos
- MetadataStorage -> document store for accounts, videos, comments
"""

from vidshare.storage.base import (
    ContentStorage,
    MetadataStorage,
    StorageProvider,
    Collections,
)
from vidshare.storage.local import (
    InMemoryMetadataStorage,
    LocalContentStorage,
    create_local_storage,
)

__all__ = [
    "ContentStorage",
    "MetadataStorage",
    "StorageProvider",
    "Collections",
    "InMemoryMetadataStorage",
    "LocalContentStorage",
    "create_local_storage",
]
