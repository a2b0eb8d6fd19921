# src/huddle/models/session.py
"""Server-side login sessions."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from huddle.db.session import Base
from huddle.db.time import UTCDateTime, utcnow
from huddle.models.user import User


class AuthSession(Base):
    """Login session keyed by the SHA-256 digest of its bearer token.

    The raw token is only ever held by the client. Rows are never mutated;
    they are deleted on logout or when found expired.
    """

    __tablename__ = "sessions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)

    user: Mapped[User] = relationship("User")

    def is_active(self, now: datetime) -> bool:
        """Return True while ``now`` is strictly before the expiry."""
        return now < self.expires_at
