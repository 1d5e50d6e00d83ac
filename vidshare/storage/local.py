"""
Local storage implementations for development.

These are in-memory or filesystem-based implementations
that work without any external services.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

from vidshare.errors import DuplicateKeyError
from vidshare.storage.base import (
    UNIQUE_FIELDS,
    ContentStorage,
    MetadataStorage,
    StorageProvider,
)


# =============================================================================
# Local Filesystem Content Storage
# =============================================================================


class LocalContentStorage(ContentStorage):
    """Store uploaded media on the local filesystem."""

    def __init__(self, base_path: str = "./public"):
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _key_to_path(self, key: str) -> Path:
        return self.base_path / key

    async def put(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> str:
        path = self._key_to_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return str(path)

    async def delete(self, key: str) -> bool:
        path = self._key_to_path(key)
        if path.exists():
            path.unlink()
            return True
        return False


# =============================================================================
# In-Memory Document Storage
# =============================================================================


class InMemoryMetadataStorage(MetadataStorage):
    """
    In-memory document store for development and tests.

    Documents are copied on the way in and out so callers never hold a
    reference into the store.
    """

    def __init__(self, unique_fields: dict[str, tuple[str, ...]] | None = None):
        self._data: dict[str, dict[str, dict[str, Any]]] = {}
        self._unique = UNIQUE_FIELDS if unique_fields is None else unique_fields

    def _check_unique(self, collection: str, id: str, data: dict[str, Any]) -> None:
        for field in self._unique.get(collection, ()):
            if field not in data:
                continue
            for other_id, doc in self._data.get(collection, {}).items():
                if other_id != id and doc.get(field) == data[field]:
                    raise DuplicateKeyError()

    async def save(self, collection: str, id: str, data: dict[str, Any]) -> None:
        self._check_unique(collection, id, data)
        self._data.setdefault(collection, {})[id] = {**copy.deepcopy(data), "id": id}

    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        doc = self._data.get(collection, {}).get(id)
        return copy.deepcopy(doc) if doc is not None else None

    async def delete(self, collection: str, id: str) -> bool:
        if collection in self._data and id in self._data[collection]:
            del self._data[collection][id]
            return True
        return False

    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        if collection not in self._data:
            return []

        results = list(self._data[collection].values())

        # Apply filters
        if filters:
            results = [
                doc for doc in results
                if all(doc.get(key) == value for key, value in filters.items())
            ]

        # Apply pagination
        return copy.deepcopy(results[offset:offset + limit])

    async def update(self, collection: str, id: str, updates: dict[str, Any]) -> bool:
        doc = self._data.get(collection, {}).get(id)
        if doc is None:
            return False
        self._check_unique(collection, id, updates)
        doc.update(copy.deepcopy(updates))
        return True

    async def add_to_set(self, collection: str, id: str, field: str, value: Any) -> bool:
        doc = self._data.get(collection, {}).get(id)
        if doc is None:
            return False
        values = doc.setdefault(field, [])
        if value not in values:
            values.append(value)
        return True

    async def remove_from_set(self, collection: str, id: str, field: str, value: Any) -> bool:
        doc = self._data.get(collection, {}).get(id)
        if doc is None:
            return False
        doc[field] = [v for v in doc.get(field, []) if v != value]
        return True


# =============================================================================
# Factory
# =============================================================================


def create_local_storage(data_dir: str = "./public") -> StorageProvider:
    """Create a StorageProvider with local implementations."""
    return StorageProvider(
        content=LocalContentStorage(data_dir),
        metadata=InMemoryMetadataStorage(),
    )
