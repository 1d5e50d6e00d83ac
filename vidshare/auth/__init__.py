"""
Authentication and authorization.

- Passwords are hashed with PBKDF2 (`PasswordHasher`)
- Sessions are stateless HS256 JWTs carried in the `access_token` cookie
- `require_auth` is the FastAPI dependency that yields an `AuthContext`
- Mutations are gated by a single rule: only the owner may change a resource
"""

from vidshare.auth.context import AuthContext
from vidshare.auth.jwt import ACCESS_TOKEN_COOKIE, IdentityClaim, TokenCodec
from vidshare.auth.passwords import PasswordHasher
from vidshare.auth.policies import AccessGuard, ensure_owner, may_modify, require_auth
from vidshare.auth.relationships import RelationshipManager

__all__ = [
    # Main interface
    "require_auth",
    "AuthContext",
    "AccessGuard",
    "ensure_owner",
    "may_modify",
    # Tokens
    "ACCESS_TOKEN_COOKIE",
    "IdentityClaim",
    "TokenCodec",
    # Credentials
    "PasswordHasher",
    # Subscriptions
    "RelationshipManager",
]
