"""
Shared fixtures.
"""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from vidshare.api.app import create_app
from vidshare.auth.jwt import TokenCodec
from vidshare.auth.passwords import PasswordHasher
from vidshare.config import Settings
from vidshare.storage import InMemoryMetadataStorage, LocalContentStorage, StorageProvider

SECRET = "test-secret"


@pytest.fixture
def settings(tmp_path):
    """Development settings with cheap hashing and a throwaway data dir."""
    return Settings(
        environment="development",
        jwt_secret_key=SECRET,
        jwt_expire_seconds=3600,
        password_hash_iterations=1_000,
        data_dir=str(tmp_path / "public"),
        public_base_url="http://testserver",
    )


@pytest.fixture
def metadata():
    return InMemoryMetadataStorage()


@pytest.fixture
def storage(settings, metadata):
    return StorageProvider(
        content=LocalContentStorage(settings.data_dir),
        metadata=metadata,
    )


@pytest.fixture
def app(settings, storage):
    return create_app(settings, storage)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def other_client(app):
    """A second browser, with its own cookie jar."""
    return TestClient(app)


@pytest.fixture
def codec():
    return TokenCodec(secret_key=SECRET, ttl=timedelta(hours=1))


@pytest.fixture
def hasher():
    return PasswordHasher(iterations=1_000)
