"""Error taxonomy shared by the core services and the HTTP boundary.

Every expected failure is a ``HuddleError`` carrying a human-readable message,
a stable machine code and the HTTP status the boundary should answer with.
``InternalError`` is the only kind that signals a system fault.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


class HuddleError(Exception):
    """Base exception for Huddle."""

    code = "INTERNAL_ERROR"
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, details: Any | None = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(HuddleError):
    """Raised when input is malformed; never retried."""

    code = "VALIDATION_ERROR"
    status_code = 400
    default_message = "Validation error"


class AuthFailure(str, Enum):
    """Reasons an authentication or registration attempt is refused."""

    INVALID_CREDENTIALS = "invalid_credentials"
    DUPLICATE_EMAIL = "duplicate_email"
    INVALID_INVITE = "invalid_invite"


class AuthError(HuddleError):
    """Raised when credentials, invite codes or account creation are refused."""

    code = "AUTH_ERROR"
    status_code = 401
    default_message = INVALID_CREDENTIALS_MESSAGE

    def __init__(
        self,
        reason: AuthFailure = AuthFailure.INVALID_CREDENTIALS,
        message: str | None = None,
    ) -> None:
        self.reason = reason
        super().__init__(message)

    @classmethod
    def invalid_credentials(cls) -> AuthError:
        """Return the single generic rejection used for every login failure."""
        return cls(AuthFailure.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE)


class InvalidInviteError(AuthError):
    """Raised when registration is gated and the invite code does not match."""

    code = "INVALID_INVITE"
    status_code = 403
    default_message = "Invalid invite code"

    def __init__(self) -> None:
        super().__init__(AuthFailure.INVALID_INVITE)


class Conflict(HuddleError):
    """Raised when a write would violate a uniqueness invariant."""

    code = "CONFLICT"
    status_code = 409
    default_message = "Resource already exists"


class DuplicateEmailError(AuthError, Conflict):
    """Raised when an account already exists for the email."""

    code = "DUPLICATE_EMAIL"
    status_code = 409
    default_message = "An account with this email already exists"

    def __init__(self) -> None:
        super().__init__(AuthFailure.DUPLICATE_EMAIL)


class Unauthenticated(HuddleError):
    """Raised when a session token is missing, unknown or expired."""

    code = "UNAUTHENTICATED"
    status_code = 401
    default_message = "Not authenticated"


class NotFound(HuddleError):
    """Raised when a referenced user does not exist."""

    code = "NOT_FOUND"
    status_code = 404
    default_message = "User not found"


class InternalError(HuddleError):
    """Raised when the store fails; the request is not retried."""
