# =============================================================================
# Session Tokens
# =============================================================================
#
# Stateless HS256 JWTs carrying the minimal identity claim:
#
#   {"id": <account id>, "first_name": <display name>, "iat": ..., "exp": ...}
#
# There is no server-side session store, so a token stays valid until its
# `exp` passes. The codec never reads settings; the signing key and
# lifetime are handed in by whoever builds it.
#
# =============================================================================

from __future__ import annotations

from datetime import timedelta

import jwt
from pydantic import BaseModel

from vidshare.core.utils import utc_now
from vidshare.errors import TokenExpired, TokenInvalid

ACCESS_TOKEN_COOKIE = "access_token"


class IdentityClaim(BaseModel):
    """Who a token speaks for. Never persisted."""

    model_config = {"frozen": True}

    subject_id: str
    display_name: str


class TokenCodec:
    """Issue and parse signed, expiring session tokens."""

    def __init__(self, secret_key: str, ttl: timedelta, algorithm: str = "HS256"):
        self.secret_key = secret_key
        self.ttl = ttl
        self.algorithm = algorithm

    def issue(self, claim: IdentityClaim) -> str:
        """Create a token for `claim` that expires `ttl` from now."""
        iat = int(utc_now().timestamp())
        payload = {
            "id": claim.subject_id,
            "first_name": claim.display_name,
            "iat": iat,
            "exp": iat + int(self.ttl.total_seconds()),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def parse(self, token: str) -> IdentityClaim:
        """
        Verify signature and expiry and return the embedded claim.

        Raises:
            TokenExpired: current time is at or past `exp`
            TokenInvalid: bad signature, malformed token or missing claims
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["id", "first_name", "iat", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpired()
        except jwt.InvalidTokenError as e:
            raise TokenInvalid(f"Invalid token: {e}")

        if not isinstance(payload["id"], str) or not isinstance(payload["first_name"], str):
            raise TokenInvalid("Invalid token: identity claims must be strings")

        return IdentityClaim(subject_id=payload["id"], display_name=payload["first_name"])
