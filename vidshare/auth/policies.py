"""
Policies - the access guard and the ownership rules.

Routes that need an identity declare it:

    ctx: AuthContext = Depends(require_auth)

and mutation handlers check ownership after loading the target resource:

    video = await load_video(video_id)            # NotFound first
    ensure_owner(ctx, video.owner_id, "...")      # then ownership
"""

from __future__ import annotations

import logging

from fastapi import Request

from vidshare.auth.context import AuthContext
from vidshare.auth.jwt import ACCESS_TOKEN_COOKIE, TokenCodec
from vidshare.errors import (
    AuthenticationError,
    MalformedCredential,
    MissingCredential,
    OwnershipViolation,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Access Guard
# =============================================================================


class AccessGuard:
    """
    Turn the raw `access_token` cookie value into an AuthContext.

    Fails closed: every path that does not end in a verified token raises.
    Never touches persistence.
    """

    def __init__(self, codec: TokenCodec):
        self.codec = codec

    def authenticate(self, raw_token: object) -> AuthContext:
        """
        Raises:
            MissingCredential: no cookie
            MalformedCredential: cookie value is not a string
            TokenInvalid / TokenExpired: from the codec
        """
        if raw_token is None or raw_token == "":
            raise MissingCredential()

        if not isinstance(raw_token, str):
            raise MalformedCredential()

        claim = self.codec.parse(raw_token)
        return AuthContext.from_claim(claim)


async def require_auth(request: Request) -> AuthContext:
    """FastAPI dependency: the authenticated identity for this request."""
    guard: AccessGuard = request.app.state.access_guard
    try:
        return guard.authenticate(request.cookies.get(ACCESS_TOKEN_COOKIE))
    except AuthenticationError as e:
        logger.info(f"Rejected {request.method} {request.url.path}: {e.message}")
        raise


# =============================================================================
# Ownership
# =============================================================================


def may_modify(actor_id: str, owner_id: str) -> bool:
    """Only the owner may change or delete a resource (or an account itself)."""
    return actor_id == owner_id


def ensure_owner(ctx: AuthContext, owner_id: str, message: str | None = None) -> None:
    """Raise OwnershipViolation unless `ctx` owns the resource."""
    if not may_modify(ctx.account_id, owner_id):
        logger.warning(f"Account {ctx.account_id} tried to modify a resource owned by {owner_id}")
        raise OwnershipViolation(message)
