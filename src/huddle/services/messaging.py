"""Messaging service: sending, threads and the derived conversation list.

Messages form a flat append-only log. Threads and the inbox are computed from
that log on every call; there is no materialized per-user index.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from huddle.core.errors import NotFound, ValidationError
from huddle.core.settings import Settings, settings
from huddle.db.time import Clock, utcnow
from huddle.models import Message, User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Thread:
    """Bidirectional history between a user and one partner, oldest first."""

    messages: Sequence[Message]
    partner: User


@dataclass(frozen=True)
class Conversation:
    """A counterpart together with the latest message exchanged with them."""

    partner: User
    latest: Message

    @property
    def last_message_at(self) -> datetime:
        return self.latest.created_at


def latest_per_counterpart(user_id: int, messages: Sequence[Message]) -> dict[int, Message]:
    """Map each counterpart to the maximum-(created_at, id) message with them."""
    latest: dict[int, Message] = {}
    for message in messages:
        counterpart = message.counterpart_of(user_id)
        current = latest.get(counterpart)
        if current is None or message.ordering_key > current.ordering_key:
            latest[counterpart] = message
    return latest


class MessagingService:
    """Persists direct messages and derives thread and inbox views."""

    def __init__(self, db: Session, config: Settings = settings, clock: Clock = utcnow) -> None:
        self.db = db
        self.max_length = config.message_max_length
        self.clock = clock

    def validate_body(self, body: str) -> str:
        if not body:
            raise ValidationError("Message cannot be empty")
        if len(body) > self.max_length:
            raise ValidationError("Message is too long")
        return body

    def send_message(self, sender_id: int, receiver_id: int, body: str) -> Message:
        """Persist a message with a server-assigned timestamp.

        Raises:
            ValidationError: Messaging yourself, or an empty/oversized body.
            NotFound: If the receiver does not exist.
        """
        if sender_id == receiver_id:
            raise ValidationError("Cannot message yourself")
        if self.db.get(User, receiver_id) is None:
            raise NotFound()
        self.validate_body(body)

        message = Message(
            sender_id=sender_id,
            receiver_id=receiver_id,
            body=body,
            created_at=self.clock(),
        )
        self.db.add(message)
        self.db.flush()
        logger.debug("Stored message id=%s from user_id=%s", message.id, sender_id)
        return message

    def get_thread(self, user_id: int, partner_id: int) -> Thread:
        """Return every message between the pair in either direction.

        Raises:
            NotFound: If the partner does not exist.
        """
        partner = self.db.get(User, partner_id)
        if partner is None:
            raise NotFound()

        messages = (
            self.db.query(Message)
            .filter(
                or_(
                    and_(Message.sender_id == user_id, Message.receiver_id == partner_id),
                    and_(Message.sender_id == partner_id, Message.receiver_id == user_id),
                )
            )
            .order_by(Message.created_at.asc(), Message.id.asc())
            .all()
        )
        return Thread(messages=messages, partner=partner)

    def list_conversations(self, user_id: int) -> list[Conversation]:
        """Return one entry per counterpart, most recent conversation first.

        Scans every message involving ``user_id``, partitions by counterpart
        and keeps the latest message of each partition. A user with no
        messages gets an empty list.
        """
        messages = (
            self.db.query(Message)
            .filter(or_(Message.sender_id == user_id, Message.receiver_id == user_id))
            .all()
        )
        latest = latest_per_counterpart(user_id, messages)
        if not latest:
            return []

        partners = {
            user.id: user
            for user in self.db.query(User).filter(User.id.in_(latest.keys())).all()
        }
        conversations = [
            Conversation(partner=partners[counterpart], latest=message)
            for counterpart, message in latest.items()
            if counterpart in partners
        ]
        conversations.sort(key=lambda conv: conv.latest.ordering_key, reverse=True)
        return conversations
