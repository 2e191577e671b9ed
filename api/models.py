"""
API request and response models for the account service REST endpoints.

These Pydantic v2 models define the HTTP transport contract. They are
intentionally separate from the dataclasses in auth/models.py, which own the
internal domain representation. Route handlers map between the two.

Wire field names are camelCase (fullName, isBlocked, accessToken, ...). The
alias generator handles that so Python attribute names stay snake_case.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from auth.models import User, UserPage


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


def _encodable(value: Optional[str]) -> Optional[str]:
    """Reject strings holding lone surrogates, which JSON escapes can produce."""
    if value is not None:
        try:
            value.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise ValueError("must be valid UTF-8 text") from exc
    return value


class RegisterRequest(BaseModel):
    """Request body for POST /api/auth/register.

    Every field is optional at the schema level. The register flow reports
    missing fields itself ("All fields are required.") with a 400, rather than
    letting Pydantic produce a per-field error list.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    full_name: Optional[str] = Field(default=None, max_length=255)
    birth_date: Optional[date] = None
    email: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, max_length=255)
    role: Optional[str] = Field(default=None, max_length=20)

    check_text = field_validator("full_name", "email", "password", "role")(_encodable)


class LoginRequest(BaseModel):
    """Request body for POST /api/auth/login."""

    email: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, max_length=255)

    check_text = field_validator("email", "password")(_encodable)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class PublicUser(BaseModel):
    """A user record as returned to clients. There is no password field."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    full_name: str
    birth_date: str
    email: str
    role: str
    is_blocked: bool
    created_at: str
    updated_at: str

    @classmethod
    def from_user(cls, user: User) -> "PublicUser":
        """Build a PublicUser from a domain User, dropping password_hash."""
        return cls(
            id=user.id,
            full_name=user.full_name,
            birth_date=user.birth_date,
            email=user.email,
            role=user.role.value,
            is_blocked=user.is_blocked,
            created_at=user.created_at or "",
            updated_at=user.updated_at or "",
        )


class UserListResponse(BaseModel):
    """Response for GET /api/users."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    total_items: int
    total_pages: int
    current_page: int
    users: list[PublicUser]

    @classmethod
    def from_page(cls, page: UserPage) -> "UserListResponse":
        return cls(
            total_items=page.total_count,
            total_pages=page.total_pages,
            current_page=page.current_page,
            users=[PublicUser.from_user(u) for u in page.items],
        )


class LoginResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    access_token: str


class ErrorResponse(BaseModel):
    """Error envelope returned on every 4xx/5xx response."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str
    components: dict[str, str] = Field(default_factory=dict)
