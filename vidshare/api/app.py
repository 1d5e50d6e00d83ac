"""
FastAPI application for the vidshare backend.

Run with:
    uvicorn vidshare.main:app --reload
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from vidshare.api import accounts, comments, videos
from vidshare.api.errors import register_error_handlers
from vidshare.auth.jwt import TokenCodec
from vidshare.auth.passwords import PasswordHasher
from vidshare.auth.policies import AccessGuard
from vidshare.auth.relationships import RelationshipManager
from vidshare.config import Settings, get_settings
from vidshare.storage import StorageProvider, create_local_storage

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info(f"vidshare API starting in {settings.environment} mode")
    yield
    logger.info("vidshare API shutting down")


def create_app(
    settings: Settings | None = None,
    storage: StorageProvider | None = None,
) -> FastAPI:
    """
    Build the application.

    Settings are read here, once, and turned into the objects routes depend
    on. Nothing below this point reads configuration on its own.
    """
    settings = settings or get_settings()

    data_dir = Path(settings.data_dir)
    for folder in ("images", "videos"):
        (data_dir / folder).mkdir(parents=True, exist_ok=True)
    storage = storage or create_local_storage(str(data_dir))

    app = FastAPI(
        title="vidshare API",
        description="Accounts, videos and comments for a video-sharing platform",
        version="0.1.0",
        lifespan=lifespan,
    )

    codec = TokenCodec(
        secret_key=settings.jwt_secret_key,
        ttl=timedelta(seconds=settings.jwt_expire_seconds),
        algorithm=settings.jwt_algorithm,
    )
    app.state.settings = settings
    app.state.storage = storage
    app.state.token_codec = codec
    app.state.access_guard = AccessGuard(codec)
    app.state.password_hasher = PasswordHasher(iterations=settings.password_hash_iterations)
    app.state.relationships = RelationshipManager(storage.metadata)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(accounts.router)
    app.include_router(videos.router)
    app.include_router(comments.router)

    app.mount("/images", StaticFiles(directory=data_dir / "images"), name="images")
    app.mount("/videos", StaticFiles(directory=data_dir / "videos"), name="videos")

    @app.get("/health")
    async def health():
        return {"status": "ok", "environment": settings.environment}

    return app
