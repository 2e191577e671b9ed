"""
auth/accounts.py -- Registration, login and admin seeding.

Composes the password hasher, the token service and the user store. Every
failure is raised as a core.errors.AccountError subclass; api/main.py turns
those into responses.

Security:
  Admin elevation happens in exactly one place: register() with role="admin"
  and a bearer token whose role claim is admin. Any other requested role is
  silently stored as "user".

  login() tells the caller which check failed (not found / blocked / bad
  password) through the message text only; the status is 401 in all three
  cases. The bcrypt work still runs for unknown emails against _DUMMY_HASH so
  the response time does not give the answer away on top of that.
"""

from __future__ import annotations

import logging
import secrets
from datetime import date
from typing import NoReturn

from sqlalchemy.exc import IntegrityError

from auth.models import Role, User
from auth.passwords import hash_password, verify_password
from auth.store import UserStore
from auth.tokens import TokenError, TokenService
from core.errors import AuthenticationFailed, AuthFailure, Conflict, Forbidden, Unauthorized, ValidationError

logger = logging.getLogger("accounts.auth")

DEFAULT_ADMIN_EMAIL = "admin@example.com"

# Computed once at import so the first unknown-email login is not measurably
# slower than the rest.
_DUMMY_HASH: str = hash_password("accounts_timing_dummy")


def register(
    store: UserStore,
    tokens: TokenService,
    *,
    full_name: str | None,
    birth_date: str | None,
    email: str | None,
    password: str | None,
    role: str | None = None,
    bearer_token: str | None = None,
) -> User:
    """Create a new account and return the stored record.

    bearer_token is only consulted when role == "admin". Returns the full
    User; callers must not serialize password_hash.
    """
    if not (full_name and birth_date and email and password):
        raise ValidationError("All fields are required.")

    new_role = Role.user
    if role == Role.admin.value:
        _require_admin_token(tokens, bearer_token)
        new_role = Role.admin

    user = User(
        full_name=full_name,
        birth_date=birth_date,
        email=email,
        password_hash=hash_password(password),
        role=new_role,
    )
    try:
        user_id = store.create_user(user)
    except IntegrityError as exc:
        raise Conflict("User with this email already exists.") from exc

    logger.info("Registered user %s (role=%s)", user_id, new_role.value)
    created = store.get_by_id(user_id)
    if created is None:
        raise RuntimeError(f"User {user_id} not found after insert")
    return created


def _require_admin_token(tokens: TokenService, bearer_token: str | None) -> None:
    if not bearer_token:
        raise Unauthorized("Unauthorized: Admin token is required.")
    try:
        claims = tokens.verify(bearer_token)
    except TokenError as exc:
        raise Unauthorized("Unauthorized: Invalid or expired token.") from exc
    if claims.role != Role.admin:
        raise Forbidden("Forbidden: Admin privileges required.")


def login(store: UserStore, tokens: TokenService, email: str | None, password: str | None) -> str:
    """Check credentials and return a freshly issued access token.

    Checks run in a fixed order: existence, blocked flag, then password.
    A blocked account is refused before its password is looked at.
    """
    if not (email and password):
        raise ValidationError("Email and password are required.")

    user = store.get_by_email(email)
    if user is None:
        verify_password(password, _DUMMY_HASH)
        _fail(AuthFailure.USER_NOT_FOUND)
    if user.is_blocked:
        _fail(AuthFailure.USER_BLOCKED)
    if not verify_password(password, user.password_hash):
        _fail(AuthFailure.INVALID_PASSWORD)

    return tokens.issue(user.id, user.role)


def _fail(reason: AuthFailure) -> NoReturn:
    logger.info("Login refused: %s", reason.value)
    raise AuthenticationFailed(reason)


def seed_admin(store: UserStore, email: str = DEFAULT_ADMIN_EMAIL) -> str | None:
    """Create a default admin account if none exists.

    Returns the generated temporary password, or None when an admin is already
    present. The credentials are logged once so the operator can sign in and
    replace them.

    Raises Conflict when the email already belongs to a regular account.
    """
    if store.has_admin():
        return None

    logger.info("No admin user found. Creating a new one...")
    temp_password = secrets.token_hex(8)
    try:
        store.create_user(
            User(
                full_name="Default Admin",
                birth_date=date.today().isoformat(),
                email=email,
                password_hash=hash_password(temp_password),
                role=Role.admin,
            )
        )
    except IntegrityError as exc:
        raise Conflict("User with this email already exists.") from exc
    logger.warning(
        "ADMIN USER CREATED -- change these credentials as soon as possible. Email: %s Password: %s",
        email,
        temp_password,
    )
    return temp_password
