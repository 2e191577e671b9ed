"""Unit tests for auth/tokens.py -- TokenService issue and verify.

Covers:
  - Round trip: verify(issue(id, role)) returns the same subject and role
  - Claims on the wire: id, role, iat, exp = iat + 1h
  - Expired tokens raise TokenExpired, not TokenInvalid
  - Tampered, foreign-key, malformed and claim-less tokens raise TokenInvalid
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from auth.models import Role, TokenClaims
from auth.tokens import ALGORITHM, TokenError, TokenExpired, TokenInvalid, TokenService


class TestIssue:
    def test_round_trip(self, tokens: TokenService) -> None:
        claims = tokens.verify(tokens.issue("user-123", Role.user))
        assert claims == TokenClaims(subject="user-123", role=Role.user)

    def test_admin_role_round_trip(self, tokens: TokenService) -> None:
        claims = tokens.verify(tokens.issue("admin-1", "admin"))
        assert claims.role is Role.admin

    def test_payload_claims(self, tokens: TokenService) -> None:
        payload = jwt.get_unverified_claims(tokens.issue("user-123", Role.user))
        assert payload["id"] == "user-123"
        assert payload["role"] == "user"
        assert payload["exp"] - payload["iat"] == 3600

    def test_unknown_role_rejected_at_issue(self, tokens: TokenService) -> None:
        with pytest.raises(ValueError):
            tokens.issue("user-123", "superuser")

    def test_empty_secret_rejected(self) -> None:
        with pytest.raises(ValueError):
            TokenService("")


class TestVerifyFailures:
    def test_expired_token(self, tokens: TokenService, token_secret: str) -> None:
        expired = TokenService(token_secret, expire_seconds=-10)
        token = expired.issue("user-123", Role.user)
        with pytest.raises(TokenExpired):
            tokens.verify(token)

    def test_expired_is_a_token_error(self) -> None:
        assert issubclass(TokenExpired, TokenError)
        assert issubclass(TokenInvalid, TokenError)
        assert not issubclass(TokenExpired, TokenInvalid)

    def test_wrong_secret(self, tokens: TokenService) -> None:
        other = TokenService("another-secret-key-that-is-also-32-chars-long")
        with pytest.raises(TokenInvalid):
            tokens.verify(other.issue("user-123", Role.user))

    def test_tampered_signature(self, tokens: TokenService) -> None:
        token = tokens.issue("user-123", Role.user)
        header, payload, signature = token.split(".")
        flipped = ("A" if signature[0] != "A" else "B") + signature[1:]
        with pytest.raises(TokenInvalid):
            tokens.verify(f"{header}.{payload}.{flipped}")

    def test_elevated_role_with_forged_payload(self, tokens: TokenService) -> None:
        """Re-signing with a different key cannot mint an admin token."""
        forged = jwt.encode(
            {"id": "user-123", "role": "admin", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            "attacker-controlled-secret-value-000000",
            algorithm=ALGORITHM,
        )
        with pytest.raises(TokenInvalid):
            tokens.verify(forged)

    @pytest.mark.parametrize("garbage", ["", "not-a-jwt", "a.b.c", "Bearer xyz"])
    def test_malformed(self, tokens: TokenService, garbage: str) -> None:
        with pytest.raises(TokenInvalid):
            tokens.verify(garbage)

    def test_missing_subject(self, tokens: TokenService, token_secret: str) -> None:
        token = jwt.encode(
            {"role": "user", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            token_secret,
            algorithm=ALGORITHM,
        )
        with pytest.raises(TokenInvalid):
            tokens.verify(token)

    def test_unknown_role_claim(self, tokens: TokenService, token_secret: str) -> None:
        token = jwt.encode(
            {"id": "user-123", "role": "root", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            token_secret,
            algorithm=ALGORITHM,
        )
        with pytest.raises(TokenInvalid):
            tokens.verify(token)
