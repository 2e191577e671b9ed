"""
core/errors.py -- Domain error taxonomy for the account service.

Flows in auth/ raise these; api/main.py turns every AccountError into the
shared ErrorResponse envelope using the class's status_code and code. Keeping
the HTTP status on the exception class means route handlers never translate
errors by hand.

Layer rule: core/ is the kernel. No imports from api/ or auth/.
"""

from __future__ import annotations

from enum import Enum


class AccountError(Exception):
    """Base class for every expected failure a caller can be told about."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AccountError):
    """Required input is missing."""

    status_code = 400
    code = "validation_error"


class Unauthorized(AccountError):
    """No usable credential was presented."""

    status_code = 401
    code = "unauthorized"


class Forbidden(AccountError):
    """A credential was presented but does not grant the operation."""

    status_code = 403
    code = "forbidden"


class NotFound(AccountError):
    status_code = 404
    code = "not_found"


class Conflict(AccountError):
    """A uniqueness constraint in the directory was violated."""

    status_code = 409
    code = "conflict"


class AuthFailure(str, Enum):
    """Reasons a password login is refused.

    The value doubles as the error code in the response body. All three map to
    HTTP 401; only the message tells them apart.
    """

    USER_NOT_FOUND = "user_not_found"
    USER_BLOCKED = "user_blocked"
    INVALID_PASSWORD = "invalid_password"


_AUTH_FAILURE_MESSAGES = {
    AuthFailure.USER_NOT_FOUND: "Authentication failed: User not found.",
    AuthFailure.USER_BLOCKED: "Authentication failed: User is blocked.",
    AuthFailure.INVALID_PASSWORD: "Authentication failed: Invalid password.",
}


class AuthenticationFailed(Unauthorized):
    """Login refused. `reason` says which check failed."""

    def __init__(self, reason: AuthFailure) -> None:
        super().__init__(_AUTH_FAILURE_MESSAGES[reason])
        self.reason = reason
        self.code = reason.value
