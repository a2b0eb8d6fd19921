"""Session manager: opaque token issuance, validation and revocation.

A session is ``Active`` until its absolute expiry, then ``Expired``; logout
moves it to ``Revoked`` by deleting the row. Validity is checked only when a
token is presented and is never extended by use. Successful validation
records the user's presence (``last_seen_at``) as a best-effort heartbeat.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from huddle.core.errors import Unauthenticated
from huddle.core.security import SessionToken
from huddle.core.settings import Settings, settings
from huddle.db.time import Clock, utcnow
from huddle.models import AuthSession, User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssuedSession:
    """A freshly issued token and the moment it stops being valid."""

    token: SessionToken
    user_id: int
    expires_at: datetime


class SessionManager:
    """Issues, validates and revokes login sessions."""

    def __init__(self, db: Session, config: Settings = settings, clock: Clock = utcnow) -> None:
        self.db = db
        self.config = config
        self.clock = clock

    @property
    def ttl(self) -> timedelta:
        return timedelta(days=self.config.session_ttl_days)

    def issue(self, user_id: int) -> IssuedSession:
        """Create a new session for ``user_id``; other sessions are untouched."""
        token = SessionToken.generate()
        now = self.clock()
        expires_at = now + self.ttl
        self.db.add(
            AuthSession(
                id=token.digest(),
                user_id=user_id,
                expires_at=expires_at,
                created_at=now,
            )
        )
        self.db.flush()
        logger.info("Issued session for user_id=%s", user_id)
        return IssuedSession(token=token, user_id=user_id, expires_at=expires_at)

    def validate(self, token: SessionToken | None) -> User:
        """Resolve a token to its user.

        Raises:
            Unauthenticated: If the token is missing, unknown or expired.
        """
        if token is None:
            raise Unauthenticated()

        now = self.clock()
        record = self.db.get(AuthSession, token.digest())
        if record is None:
            raise Unauthenticated()

        if not record.is_active(now):
            self._discard_expired(record)
            raise Unauthenticated()

        user = record.user
        self._touch_last_seen(user, now)
        return user

    def revoke(self, token: SessionToken | None) -> None:
        """Delete the session if it exists. Safe to call repeatedly."""
        if token is None:
            return
        deleted = (
            self.db.query(AuthSession)
            .filter(AuthSession.id == token.digest())
            .delete(synchronize_session=False)
        )
        self.db.commit()
        if deleted:
            logger.info("Revoked session")

    def _discard_expired(self, record: AuthSession) -> None:
        # Lazy invalidation; there is no background sweep. A failed delete
        # leaves the row for the next attempt, which rejects it again.
        user_id = record.user_id
        try:
            self.db.delete(record)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.warning("Could not delete expired session for user_id=%s", user_id, exc_info=True)

    def _touch_last_seen(self, user: User, now: datetime) -> None:
        # Presence heartbeat must never fail the request it rides on. It runs
        # before the operation's own writes, so a rollback here loses nothing.
        user_id = user.id
        try:
            self.db.query(User).filter(User.id == user_id).update({User.last_seen_at: now})
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.warning("Could not record last_seen for user_id=%s", user_id, exc_info=True)
