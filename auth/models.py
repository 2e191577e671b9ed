"""
auth/models.py -- Domain dataclasses for account entities.

Pattern: Data class (pure data container, zero logic). Stores and flows do the
work; api/models.py owns the HTTP shape.

Layer rule: no imports from api/.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Role(str, Enum):
    user = "user"
    admin = "admin"


@dataclass
class User:
    """A registered account.

    id is assigned by UserStore.create_user() (UUID4 string) and never changes.
    password_hash is a bcrypt digest and must never leave the service -- the
    API layer builds a PublicUser that has no password field at all.

    birth_date is an ISO date string (YYYY-MM-DD); created_at and updated_at
    are ISO-8601 UTC timestamps set by the store.
    """

    full_name: str
    birth_date: str
    email: str
    password_hash: str
    role: Role = Role.user
    id: str | None = None
    is_blocked: bool = False
    created_at: str | None = None
    updated_at: str | None = None


@dataclass(frozen=True)
class TokenClaims:
    """Identity decoded from a verified access token.

    subject is the User.id the token was issued for.
    """

    subject: str
    role: Role


@dataclass
class UserPage:
    """One page of the admin user listing."""

    items: list[User] = field(default_factory=list)
    total_count: int = 0
    total_pages: int = 0
    current_page: int = 1
