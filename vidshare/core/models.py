"""
Core data models for the vidshare backend.

Accounts, Videos and Comments as they are stored in the document store,
plus the request bodies the HTTP API accepts for them.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, EmailStr, Field

from vidshare.core.utils import generate_id, utc_now


# =============================================================================
# Enums
# =============================================================================


class AccountRole(str, Enum):
    """Stored on every account. Not used for authorization."""

    USER = "user"
    ADVANCED_USER = "advanced_user"
    MODERATOR = "moderator"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


# =============================================================================
# Account
# =============================================================================


class Account(BaseModel):
    """
    A channel on the platform.

    `subscribers` holds accounts following this one, `subscribed_to` the
    accounts this one follows. Both behave as sets and are only changed by
    `vidshare.auth.relationships.RelationshipManager`.
    """

    id: str = Field(default_factory=lambda: generate_id("acc"))
    first_name: str = Field(min_length=3)
    last_name: str = " "
    username: str = Field(min_length=3)
    email: EmailStr
    password_hash: str
    role: AccountRole = AccountRole.USER
    profile_image: str = "profile_image.jpg"
    blocked: bool = False
    is_email_verified: bool = False

    subscribers: list[str] = Field(default_factory=list)
    subscribed_to: list[str] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def public(self) -> dict[str, Any]:
        """Account data safe to return to clients."""
        return self.model_dump(mode="json", exclude={"password_hash"})


class RegisterRequest(BaseModel):
    first_name: str = Field(min_length=3)
    last_name: str | None = None
    username: str = Field(min_length=3)
    email: EmailStr
    password: str = Field(min_length=8)


class LoginRequest(BaseModel):
    # Either field may be missing; the login route reports which one.
    emailOrUsername: str | None = None
    password: str | None = None


class AccountUpdate(BaseModel):
    """Profile fields an owner may change on their own account."""

    first_name: str | None = Field(default=None, min_length=3)
    last_name: str | None = None
    username: str | None = Field(default=None, min_length=3)
    email: EmailStr | None = None
    profile_image: str | None = None


# =============================================================================
# Video
# =============================================================================


class Video(BaseModel):
    """An uploaded video. `owner_id` is fixed at creation."""

    id: str = Field(default_factory=lambda: generate_id("vid"))
    owner_id: str
    title: str
    description: str
    img_url: str
    video_url: str
    views: int = 0
    tags: list[str] = Field(default_factory=list)
    likes: list[str] = Field(default_factory=list)
    dislikes: list[str] = Field(default_factory=list)
    comments_closed: bool = False

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class VideoUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    tags: list[str] | None = None
    comments_closed: bool | None = None


# =============================================================================
# Comment
# =============================================================================


class Comment(BaseModel):
    """A comment on a video. Only `edited` may change after creation."""

    id: str = Field(default_factory=lambda: generate_id("cmt"))
    owner_id: str
    video_id: str
    description: str
    edited: bool = False

    created_at: datetime = Field(default_factory=utc_now)


class CommentCreate(BaseModel):
    description: str | None = None
