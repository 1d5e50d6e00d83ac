"""
Shared FastAPI dependencies.

Everything here is built once in `create_app` and kept on `app.state`.
"""

from __future__ import annotations

from fastapi import Request

from vidshare.auth.jwt import TokenCodec
from vidshare.auth.passwords import PasswordHasher
from vidshare.auth.relationships import RelationshipManager
from vidshare.config import Settings
from vidshare.storage import StorageProvider


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> StorageProvider:
    return request.app.state.storage


def get_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec


def get_relationships(request: Request) -> RelationshipManager:
    return request.app.state.relationships
