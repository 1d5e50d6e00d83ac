"""
Storage abstraction layer.

All persistence goes through these interfaces. This allows swapping
implementations (in-memory -> MongoDB, local filesystem -> S3)
without changing application code.

Implementations raise `vidshare.errors.PersistenceError` when the backend
is unavailable and `vidshare.errors.DuplicateKeyError` when a unique field
collides.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel


# =============================================================================
# Storage Interfaces
# =============================================================================


class ContentStorage(ABC):
    """
    Storage for uploaded media (thumbnails, video files).

    Local Implementation: Filesystem
    """

    @abstractmethod
    async def put(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> str:
        """Store content, return URL/path."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete content."""
        pass


class MetadataStorage(ABC):
    """
    Document store for accounts, videos and comments.

    Documents are plain dicts keyed by `id` within a collection.
    """

    @abstractmethod
    async def save(self, collection: str, id: str, data: dict[str, Any]) -> None:
        """Save a document to a collection."""
        pass

    @abstractmethod
    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        """Get a document by ID."""
        pass

    @abstractmethod
    async def delete(self, collection: str, id: str) -> bool:
        """Delete a document."""
        pass

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        """Query documents with optional equality filters."""
        pass

    @abstractmethod
    async def update(self, collection: str, id: str, updates: dict[str, Any]) -> bool:
        """Partial update of a document."""
        pass

    @abstractmethod
    async def add_to_set(self, collection: str, id: str, field: str, value: Any) -> bool:
        """
        Add `value` to the list `field` unless already present.

        Returns False if the document does not exist.
        """
        pass

    @abstractmethod
    async def remove_from_set(self, collection: str, id: str, field: str, value: Any) -> bool:
        """
        Remove every occurrence of `value` from the list `field`.

        Returns False if the document does not exist.
        """
        pass

    async def find_one(self, collection: str, filters: dict[str, Any]) -> dict[str, Any] | None:
        """First document matching all filters, or None."""
        results = await self.query(collection, filters, limit=1)
        return results[0] if results else None

    async def delete_many(self, collection: str, filters: dict[str, Any]) -> int:
        """Delete every matching document, return how many were removed."""
        deleted = 0
        while True:
            removed = 0
            for doc in await self.query(collection, filters):
                if await self.delete(collection, doc["id"]):
                    removed += 1
            if not removed:
                return deleted
            deleted += removed


# =============================================================================
# Storage Provider (dependency injection container)
# =============================================================================


class StorageProvider(BaseModel):
    """
    Container for all storage backends.

    Initialize once at app startup with appropriate implementations.
    Routes receive this and use the interfaces without knowing
    the underlying implementation.
    """

    model_config = {"arbitrary_types_allowed": True}

    content: ContentStorage
    metadata: MetadataStorage


# =============================================================================
# Collection Names (for MetadataStorage)
# =============================================================================


class Collections:
    """Standard collection names."""

    ACCOUNTS = "accounts"
    VIDEOS = "videos"
    COMMENTS = "comments"


# Fields that must be unique across a collection
UNIQUE_FIELDS: dict[str, tuple[str, ...]] = {
    Collections.ACCOUNTS: ("email", "username"),
}
