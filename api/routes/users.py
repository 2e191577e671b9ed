"""
api/routes/users.py -- User management REST endpoints.

Routes:
  GET   /api/users?page&limit   -- paginated listing (admin only)
  GET   /api/users/{user_id}    -- one account (self or admin)
  PATCH /api/users/{user_id}/block -- block an account (self or admin)

Every route needs a valid bearer token; the router-level dependency answers
401 for a missing token and 403 for an expired or invalid one before any
handler runs. Ownership and role checks happen in auth.management.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request

from api.models import PublicUser, UserListResponse
from auth import management
from auth.dependencies import get_token_claims
from auth.models import TokenClaims
from auth.store import UserStore

router = APIRouter(dependencies=[Depends(get_token_claims)])


@router.get("/users", response_model=UserListResponse)
def list_users(
    request: Request,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    claims: TokenClaims = Depends(get_token_claims),
) -> UserListResponse:
    """List accounts, newest first.

    page and limit are taken as raw strings: non-numeric values fall back to
    the defaults (1 and 10) instead of failing validation.
    """
    user_store: UserStore = request.app.state.user_store
    result = management.list_users(user_store, claims, page=page, limit=limit)
    return UserListResponse.from_page(result)


@router.get("/users/{user_id}", response_model=PublicUser)
def get_user(
    request: Request,
    user_id: str,
    claims: TokenClaims = Depends(get_token_claims),
) -> PublicUser:
    user_store: UserStore = request.app.state.user_store
    return PublicUser.from_user(management.get_user(user_store, claims, user_id))


@router.patch("/users/{user_id}/block", response_model=PublicUser)
def block_user(
    request: Request,
    user_id: str,
    claims: TokenClaims = Depends(get_token_claims),
) -> PublicUser:
    """Block an account. The response carries isBlocked=true."""
    user_store: UserStore = request.app.state.user_store
    return PublicUser.from_user(management.block_user(user_store, claims, user_id))
