"""
auth/management.py -- Listing, fetching and blocking user accounts.

Each operation is gated by exactly one predicate from auth/policy.py before it
reads or writes the store. The requester is the TokenClaims decoded from the
caller's bearer token.
"""

from __future__ import annotations

import logging
import math

from auth.models import TokenClaims, User, UserPage
from auth.policy import can_access_user, can_block_user, can_list_all
from auth.store import UserStore
from core.errors import Forbidden, NotFound

logger = logging.getLogger("accounts.auth")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def _positive_int(value, default: int) -> int:
    """Coerce a query value to a positive int, falling back to default.

    Missing, non-numeric and non-positive values all give the default.
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def list_users(store: UserStore, requester: TokenClaims, page=None, limit=None) -> UserPage:
    """Return one page of accounts, newest first. Admin only.

    limit is capped at MAX_LIMIT. A page past the last one comes back empty
    without querying, so a huge page number never reaches the database.
    """
    if not can_list_all(requester.role):
        raise Forbidden("Forbidden: Admin role required.")

    page = _positive_int(page, DEFAULT_PAGE)
    limit = min(_positive_int(limit, DEFAULT_LIMIT), MAX_LIMIT)
    total = store.count_users()
    offset = (page - 1) * limit
    items = store.list_users(offset=offset, limit=limit) if offset < total else []
    return UserPage(
        items=items,
        total_count=total,
        total_pages=math.ceil(total / limit),
        current_page=page,
    )


def get_user(store: UserStore, requester: TokenClaims, target_id: str) -> User:
    if not can_access_user(requester.role, requester.subject, target_id):
        raise Forbidden("Forbidden: You can only view your own profile.")
    user = store.get_by_id(target_id)
    if user is None:
        raise NotFound("User not found.")
    return user


def block_user(store: UserStore, requester: TokenClaims, target_id: str) -> User:
    """Block an account. Blocking an already-blocked account succeeds again.

    Tokens already issued to the account stay valid until they expire; only
    future logins are refused.
    """
    if not can_block_user(requester.role, requester.subject, target_id):
        raise Forbidden("Forbidden: You can only block your own profile.")
    if not store.set_blocked(target_id):
        raise NotFound("User not found.")

    logger.info("User %s blocked by %s", target_id, requester.subject)
    user = store.get_by_id(target_id)
    if user is None:
        raise NotFound("User not found.")
    return user
