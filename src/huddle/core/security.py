"""Password hashing and session token primitives."""
from __future__ import annotations

import hashlib
import hmac
import secrets
from functools import lru_cache

import bcrypt

# bcrypt only consumes the first 72 bytes of a password.
BCRYPT_MAX_BYTES = 72
SESSION_TOKEN_BYTES = 32


class SessionToken:
    """Opaque bearer capability for one user's session.

    Equality is constant-time and the value never appears in ``repr`` so it
    cannot leak through logs or tracebacks.
    """

    __slots__ = ("_value",)

    def __init__(self, value: str) -> None:
        self._value = value

    @classmethod
    def generate(cls) -> SessionToken:
        """Draw a new 256-bit token from the OS CSPRNG."""
        return cls(secrets.token_hex(SESSION_TOKEN_BYTES))

    def reveal(self) -> str:
        """Return the raw token for the transport layer."""
        return self._value

    def digest(self) -> str:
        """Return the storage key for this token."""
        return hash_token(self._value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SessionToken):
            return NotImplemented
        return hmac.compare_digest(self._value.encode(), other._value.encode())

    def __hash__(self) -> int:
        return hash(self.digest())

    def __repr__(self) -> str:
        return "SessionToken(<redacted>)"

    __str__ = __repr__


def hash_token(token: str) -> str:
    """Return a SHA-256 hex digest of a raw session token."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int) -> str:
    """Hash a password with a fresh bcrypt salt at the given cost."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash.
        return False


@lru_cache(maxsize=8)
def dummy_password_hash(rounds: int) -> str:
    """Return a throwaway hash used to equalize timing for unknown emails."""
    return hash_password(secrets.token_hex(16), rounds)


def constant_time_equals(left: str, right: str) -> bool:
    """Compare two strings without leaking the length of a common prefix."""
    return hmac.compare_digest(left.encode("utf-8"), right.encode("utf-8"))
