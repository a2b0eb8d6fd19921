# src/huddle/models/message.py
"""Models describing direct messages between users."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from huddle.db.session import Base
from huddle.db.time import UTCDateTime, utcnow


class Message(Base):
    """Plain-text 1:1 message. Append-only: never edited or deleted."""

    __tablename__ = "messages"
    __table_args__ = (
        CheckConstraint("sender_id <> receiver_id", name="ck_messages_distinct_participants"),
        Index("ix_messages_sender_receiver", "sender_id", "receiver_id", "created_at"),
        Index("ix_messages_receiver_sender", "receiver_id", "sender_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sender_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    receiver_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)

    @property
    def ordering_key(self) -> tuple[datetime, int]:
        """Return the (created_at, id) key that totally orders messages."""
        return (self.created_at, self.id)

    def counterpart_of(self, user_id: int) -> int:
        """Return the other participant relative to ``user_id``."""
        return self.receiver_id if self.sender_id == user_id else self.sender_id
