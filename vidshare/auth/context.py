"""
Auth context - who is making this request.

Built by the access guard for each request and handed to route handlers
through FastAPI's dependency injection. It is never stored anywhere else
and cannot be changed once built.
"""

from __future__ import annotations

from dataclasses import dataclass

from vidshare.auth.jwt import IdentityClaim


@dataclass(frozen=True)
class AuthContext:
    """
    Authenticated identity for one request.

    Usage in routes:
        async def my_route(ctx: AuthContext = Depends(require_auth)):
            print(f"Account {ctx.account_id} ({ctx.first_name})")
    """

    account_id: str
    first_name: str

    @classmethod
    def from_claim(cls, claim: IdentityClaim) -> AuthContext:
        return cls(account_id=claim.subject_id, first_name=claim.display_name)

    def owns(self, owner_id: str) -> bool:
        """Is this identity the owner of a resource owned by `owner_id`?"""
        return self.account_id == owner_id
