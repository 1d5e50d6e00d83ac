# =============================================================================
# Account API Routes
# =============================================================================
#
# Endpoints:
#   POST   /api/account/register           - Create account
#   POST   /api/account/login              - Get token (also set as cookie)
#   POST   /api/account/logout             - Clear the token cookie
#   GET    /api/account/find/{account_id}  - Public account data
#   PUT    /api/account/{account_id}       - Update own account
#   DELETE /api/account/{account_id}       - Delete own account
#   PUT    /api/account/sub/{account_id}   - Subscribe to a channel
#   PUT    /api/account/unsub/{account_id} - Unsubscribe from a channel
#
# =============================================================================

from __future__ import annotations

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, Response
from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from vidshare.api.dependencies import (
    get_hasher,
    get_relationships,
    get_settings,
    get_storage,
    get_token_codec,
)
from vidshare.auth.context import AuthContext
from vidshare.auth.jwt import ACCESS_TOKEN_COOKIE, IdentityClaim, TokenCodec
from vidshare.auth.passwords import PasswordHasher
from vidshare.auth.policies import ensure_owner, require_auth
from vidshare.auth.relationships import RelationshipManager
from vidshare.config import Settings
from vidshare.core.models import Account, AccountUpdate, LoginRequest, RegisterRequest
from vidshare.core.utils import utc_now
from vidshare.errors import InvalidCredentials, NotFound, ValidationError
from vidshare.storage import Collections, StorageProvider

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/account", tags=["account"])

_email_adapter = TypeAdapter(EmailStr)


def normalize_login(value: str) -> str:
    """Emails are stored normalized by EmailStr; match them the same way."""
    if "@" not in value:
        return value
    try:
        return _email_adapter.validate_python(value)
    except PydanticValidationError:
        return value


async def load_account(storage: StorageProvider, account_id: str) -> Account:
    doc = await storage.metadata.get(Collections.ACCOUNTS, account_id)
    if doc is None:
        raise NotFound("There is no account with this id.")
    return Account.model_validate(doc)


# =============================================================================
# Public Endpoints
# =============================================================================


@router.post("/register", status_code=201)
async def register(
    data: RegisterRequest,
    storage: StorageProvider = Depends(get_storage),
    hasher: PasswordHasher = Depends(get_hasher),
):
    """Create a new account."""
    account = Account(
        first_name=data.first_name,
        last_name=data.last_name or " ",
        username=data.username,
        email=data.email,
        password_hash=hasher.hash(data.password),
    )
    await storage.metadata.save(Collections.ACCOUNTS, account.id, account.model_dump(mode="json"))

    logger.info(f"Registered account {account.id} ({account.username})")
    return {"success": True, "data": account.public()}


@router.post("/login")
async def login(
    data: LoginRequest,
    response: Response,
    storage: StorageProvider = Depends(get_storage),
    hasher: PasswordHasher = Depends(get_hasher),
    codec: TokenCodec = Depends(get_token_codec),
    settings: Settings = Depends(get_settings),
):
    """
    Authenticate with email or username and password.

    The token is returned in the body and set as an HTTP-only cookie.
    """
    if not data.emailOrUsername:
        raise ValidationError("Please provide a value.")
    if not data.password:
        raise ValidationError("Please provide a password.")

    doc = await storage.metadata.find_one(
        Collections.ACCOUNTS, {"email": normalize_login(data.emailOrUsername)}
    )
    if doc is None:
        doc = await storage.metadata.find_one(Collections.ACCOUNTS, {"username": data.emailOrUsername})
    if doc is None:
        raise NotFound("User can't be found.")

    account = Account.model_validate(doc)
    if not hasher.verify(data.password, account.password_hash):
        logger.warning(f"Failed login for account {account.id}")
        raise InvalidCredentials()

    token = codec.issue(IdentityClaim(subject_id=account.id, display_name=account.first_name))
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        token,
        httponly=True,
        expires=utc_now() + timedelta(seconds=settings.jwt_cookie_expire_seconds),
        secure=not settings.is_development,
    )

    logger.info(f"Account {account.id} logged in")
    return {
        "success": True,
        "access_token": token,
        "data": {"id": account.id, "first_name": account.first_name},
    }


@router.post("/logout")
async def logout(response: Response):
    """Clear the token cookie. The token itself stays valid until it expires."""
    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    return {"success": True, "message": "You have been logged out."}


@router.get("/find/{account_id}")
async def find_single_account(
    account_id: str,
    storage: StorageProvider = Depends(get_storage),
):
    account = await load_account(storage, account_id)
    return {"success": True, "data": account.public()}


# =============================================================================
# Protected Endpoints
# =============================================================================


@router.put("/sub/{account_id}")
async def subscribe_account(
    account_id: str,
    ctx: AuthContext = Depends(require_auth),
    relationships: RelationshipManager = Depends(get_relationships),
):
    await relationships.subscribe(ctx.account_id, account_id)
    return {"success": True, "message": f"You have been subscribed to {account_id}."}


@router.put("/unsub/{account_id}")
async def unsubscribe_account(
    account_id: str,
    ctx: AuthContext = Depends(require_auth),
    relationships: RelationshipManager = Depends(get_relationships),
):
    await relationships.unsubscribe(ctx.account_id, account_id)
    return {"success": True, "message": f"You have been unsubscribed from {account_id}."}


@router.put("/{account_id}")
async def update_account_informations(
    account_id: str,
    data: AccountUpdate,
    ctx: AuthContext = Depends(require_auth),
    storage: StorageProvider = Depends(get_storage),
):
    """Update profile fields of the caller's own account."""
    await load_account(storage, account_id)
    ensure_owner(ctx, account_id, "You cannot update this channel.")

    updates = data.model_dump(mode="json", exclude_unset=True, exclude_none=True)
    updates["updated_at"] = utc_now().isoformat()
    await storage.metadata.update(Collections.ACCOUNTS, account_id, updates)

    account = await load_account(storage, account_id)
    return {"success": True, "data": account.public()}


@router.delete("/{account_id}")
async def delete_single_account(
    account_id: str,
    response: Response,
    ctx: AuthContext = Depends(require_auth),
    storage: StorageProvider = Depends(get_storage),
    relationships: RelationshipManager = Depends(get_relationships),
):
    """Delete the caller's own account and every subscription edge it had."""
    await load_account(storage, account_id)
    ensure_owner(ctx, account_id, "You cannot delete this channel.")

    await relationships.detach(account_id)
    await storage.metadata.delete(Collections.ACCOUNTS, account_id)

    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    logger.info(f"Deleted account {account_id}")
    return {"success": True, "message": "Your channel has been deleted successfully."}
