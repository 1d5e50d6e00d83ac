"""
Tests for the access guard and the ownership rule.
"""

from dataclasses import FrozenInstanceError
from datetime import timedelta

import pytest

from vidshare.auth.context import AuthContext
from vidshare.auth.jwt import IdentityClaim, TokenCodec
from vidshare.auth.policies import AccessGuard, ensure_owner, may_modify
from vidshare.errors import (
    MalformedCredential,
    MissingCredential,
    OwnershipViolation,
    TokenExpired,
    TokenInvalid,
)


@pytest.fixture
def guard(codec):
    return AccessGuard(codec)


@pytest.fixture
def token(codec):
    return codec.issue(IdentityClaim(subject_id="acc_1", display_name="Ana"))


# =============================================================================
# AccessGuard Tests
# =============================================================================


class TestAccessGuard:
    def test_valid_token_yields_context(self, guard, token):
        ctx = guard.authenticate(token)
        assert ctx == AuthContext(account_id="acc_1", first_name="Ana")

    @pytest.mark.parametrize("raw", [None, ""])
    def test_absent_cookie(self, guard, raw):
        with pytest.raises(MissingCredential) as exc:
            guard.authenticate(raw)
        assert exc.value.status_code == 401

    @pytest.mark.parametrize("raw", [{"token": "x"}, ["a.b.c"], 42])
    def test_malformed_cookie(self, guard, raw):
        with pytest.raises(MalformedCredential) as exc:
            guard.authenticate(raw)
        assert exc.value.status_code == 400

    @pytest.mark.parametrize("raw", ["not a token", "j:{}", "aaa.bbb.ccc"])
    def test_unverifiable_string_is_invalid(self, guard, raw):
        with pytest.raises(TokenInvalid) as exc:
            guard.authenticate(raw)
        assert exc.value.status_code == 401

    def test_bad_signature(self, guard):
        other = TokenCodec(secret_key="someone-else", ttl=timedelta(hours=1))
        forged = other.issue(IdentityClaim(subject_id="acc_1", display_name="Ana"))
        with pytest.raises(TokenInvalid) as exc:
            guard.authenticate(forged)
        assert exc.value.status_code == 401

    def test_expired(self, codec):
        stale = TokenCodec(secret_key=codec.secret_key, ttl=timedelta(seconds=-5))
        token = stale.issue(IdentityClaim(subject_id="acc_1", display_name="Ana"))
        with pytest.raises(TokenExpired) as exc:
            AccessGuard(codec).authenticate(token)
        assert exc.value.status_code == 401

    def test_context_is_immutable(self, guard, token):
        ctx = guard.authenticate(token)
        with pytest.raises(FrozenInstanceError):
            ctx.account_id = "acc_2"


# =============================================================================
# Ownership Tests
# =============================================================================


class TestOwnership:
    def test_may_modify(self):
        assert may_modify("acc_1", "acc_1")
        assert not may_modify("acc_1", "acc_2")

    def test_ensure_owner_allows_owner(self):
        ensure_owner(AuthContext(account_id="acc_1", first_name="Ana"), "acc_1")

    def test_ensure_owner_refuses_others(self):
        ctx = AuthContext(account_id="acc_2", first_name="Bob")
        with pytest.raises(OwnershipViolation) as exc:
            ensure_owner(ctx, "acc_1", "You can update only your video.")
        assert exc.value.message == "You can update only your video."
        assert exc.value.status_code == 403

    def test_owns(self):
        ctx = AuthContext(account_id="acc_1", first_name="Ana")
        assert ctx.owns("acc_1")
        assert not ctx.owns("acc_9")
