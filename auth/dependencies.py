"""
auth/dependencies.py -- FastAPI Depends() helpers for bearer-token auth.

The only credential is an Authorization: Bearer <token> header.

  bearer_token()      -- soft variant: returns the raw token or None.
  get_token_claims()  -- hard variant: 401 when the token is missing,
                         403 when it is expired or invalid.

The token service lives on app.state.tokens (built in the app lifespan).
The claims are trusted as-is; the account is not re-read from the store, so a
token issued before the account was blocked keeps working until it expires.

Layer rule: auth/dependencies.py may import from fastapi because this module
is part of the FastAPI dependency injection system. No imports from api/.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from auth.models import TokenClaims
from auth.tokens import TokenExpired, TokenInvalid, TokenService

_BEARER_PREFIX = "Bearer "


def bearer_token(request: Request) -> str | None:
    """Return the token from the Authorization header, or None.

    A missing header, a different scheme, or an empty token all count as
    "no token".
    """
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith(_BEARER_PREFIX):
        return None
    token = auth_header[len(_BEARER_PREFIX) :].strip()
    return token or None


def get_token_claims(request: Request) -> TokenClaims:
    """Require a valid access token.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(claims: TokenClaims = Depends(get_token_claims)): ...
    """
    token = bearer_token(request)
    if token is None:
        raise HTTPException(
            status_code=401,
            detail={"code": "unauthorized", "message": "Unauthorized: Access token is missing."},
        )

    tokens: TokenService = request.app.state.tokens
    try:
        return tokens.verify(token)
    except TokenExpired as exc:
        raise HTTPException(
            status_code=403,
            detail={"code": "token_expired", "message": "Forbidden: Token has expired."},
        ) from exc
    except TokenInvalid as exc:
        raise HTTPException(
            status_code=403,
            detail={"code": "token_invalid", "message": "Forbidden: Invalid token."},
        ) from exc
