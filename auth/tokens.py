"""
auth/tokens.py -- Access token issuance and verification.

Security design decisions:
  JWT: python-jose with HS256. Tokens carry the user id (claim "id"), role,
       issued-at and expiry. The signing key is handed to TokenService at
       construction; the app builds one instance at startup from
       core.config.get_settings() and keeps it on app.state.tokens.

  Failure kinds: verify() raises TokenExpired or TokenInvalid. Callers need
       both because they become different responses ("Token has expired." vs
       "Invalid token."). A missing token never reaches this module -- the
       dependency layer turns that into a 401 on its own.

  No revocation: a token stays valid until exp even if the account is blocked
       afterwards. Blocking is enforced at login only.

Layer rule: no imports from api/.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from auth.models import Role, TokenClaims

ALGORITHM = "HS256"
DEFAULT_EXPIRE_SECONDS = 60 * 60


class TokenError(Exception):
    """Base class for token verification failures."""


class TokenExpired(TokenError):
    pass


class TokenInvalid(TokenError):
    pass


class TokenService:
    """Issue and verify signed, time-limited access tokens.

    Usage:
        tokens = TokenService(settings.jwt_access_secret)
        token = tokens.issue(user.id, user.role)
        claims = tokens.verify(token)   # TokenClaims(subject=..., role=...)
    """

    def __init__(self, secret_key: str, expire_seconds: int = DEFAULT_EXPIRE_SECONDS) -> None:
        if not secret_key:
            raise ValueError("TokenService requires a non-empty secret key.")
        self._secret_key = secret_key
        self.expire_seconds = expire_seconds

    def issue(self, subject: str, role: Role | str) -> str:
        """Encode a signed JWT for the given user id and role."""
        issued_at = datetime.now(timezone.utc)
        payload = {
            "id": subject,
            "role": Role(role).value,
            "iat": issued_at,
            "exp": issued_at + timedelta(seconds=self.expire_seconds),
        }
        return jwt.encode(payload, self._secret_key, algorithm=ALGORITHM)

    def verify(self, token: str) -> TokenClaims:
        """Decode and verify a JWT.

        Raises TokenExpired when exp is in the past, TokenInvalid for a bad
        signature, a malformed token, or missing/unknown claims.
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[ALGORITHM])
        except ExpiredSignatureError as exc:
            raise TokenExpired("Token has expired.") from exc
        except JWTError as exc:
            raise TokenInvalid("Invalid token.") from exc

        subject = payload.get("id")
        if not isinstance(subject, str) or not subject:
            raise TokenInvalid("Token has no subject.")
        try:
            role = Role(payload.get("role"))
        except ValueError as exc:
            raise TokenInvalid("Token has an unknown role.") from exc
        return TokenClaims(subject=subject, role=role)
