"""Credential store: password verification and account creation."""
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from huddle.core import security
from huddle.core.errors import AuthError, DuplicateEmailError, ValidationError
from huddle.core.settings import Settings, settings
from huddle.db.time import Clock, utcnow
from huddle.models import User

logger = logging.getLogger(__name__)

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128
NAME_MAX_LENGTH = 255


class CredentialStore:
    """Verifies email/password pairs and creates accounts."""

    def __init__(self, db: Session, config: Settings = settings, clock: Clock = utcnow) -> None:
        self.db = db
        self.config = config
        self.clock = clock

    def get_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(User.email == email).first()

    def verify(self, email: str, password: str) -> User:
        """Return the user owning these credentials.

        Unknown emails and wrong passwords raise the same ``AuthError``. A
        bcrypt comparison runs in both cases so response time does not reveal
        whether the account exists.

        Raises:
            AuthError: With reason ``INVALID_CREDENTIALS``.
        """
        user = self.get_by_email(email)
        if user is None:
            security.verify_password(
                password,
                security.dummy_password_hash(self.config.bcrypt_rounds),
            )
            raise AuthError.invalid_credentials()

        if not security.verify_password(password, user.password_hash):
            raise AuthError.invalid_credentials()
        return user

    def validate_signup(self, email: str, password: str, name: str) -> None:
        """Check registration input the way the signup form rules require.

        Raises:
            ValidationError: With a field-level message.
        """
        domain = (self.config.company_email_domain or "").strip().lower()
        if domain and not email.lower().endswith(f"@{domain}"):
            raise ValidationError(f"Only @{domain} emails are allowed")
        if len(password) < PASSWORD_MIN_LENGTH:
            raise ValidationError("Password must be at least 8 characters")
        if len(password) > PASSWORD_MAX_LENGTH:
            raise ValidationError("Password is too long")
        if not name.strip():
            raise ValidationError("Name is required")
        if len(name) > NAME_MAX_LENGTH:
            raise ValidationError("Name is too long")

    def create(self, email: str, password: str, name: str) -> User:
        """Persist a new account with a salted bcrypt hash.

        Raises:
            DuplicateEmailError: If the email is already registered.
        """
        if self.get_by_email(email) is not None:
            raise DuplicateEmailError()

        now = self.clock()
        user = User(
            email=email,
            password_hash=security.hash_password(password, self.config.bcrypt_rounds),
            name=name.strip(),
            show_email=True,
            created_at=now,
            updated_at=now,
        )
        self.db.add(user)
        try:
            self.db.flush()
        except IntegrityError as exc:
            # Lost a race with a concurrent registration for the same email.
            self.db.rollback()
            raise DuplicateEmailError() from exc

        logger.info("Created account user_id=%s", user.id)
        return user
