"""Core operations exposed to the presentation layer.

Every token-bearing operation resolves the session first, so an invalid token
short-circuits with ``Unauthenticated`` before any other validation. Profiles
are converted to ``ProfileView`` here, which is the only place redaction is
applied. Each operation runs as one store transaction.
"""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from huddle.core.errors import InvalidInviteError, ValidationError
from huddle.core.security import SessionToken, constant_time_equals
from huddle.core.settings import Settings, settings
from huddle.db.errors import store_transaction
from huddle.db.time import Clock, utcnow
from huddle.models import User
from huddle.schemas.message import ConversationSummary, MessageView, ThreadView
from huddle.schemas.user import DirectoryPage, ProfileUpdate, ProfileView
from huddle.services.credentials import CredentialStore
from huddle.services.directory import DirectoryService
from huddle.services.messaging import MessagingService
from huddle.services.privacy import owner_profile, profile_for, public_profile
from huddle.services.profiles import ProfileStore
from huddle.services.sessions import IssuedSession, SessionManager

logger = logging.getLogger(__name__)

TokenLike = SessionToken | str | None


def _as_token(token: TokenLike) -> SessionToken | None:
    if token is None or isinstance(token, SessionToken):
        return token
    return SessionToken(token) if token else None


def _as_page(page: int | str | None) -> int:
    if page is None or page == "":
        return 1
    try:
        return int(page)
    except ValueError:
        raise ValidationError("Page must be a whole number") from None


class Workspace:
    """Facade over the core services bound to one store handle."""

    def __init__(self, db: Session, config: Settings = settings, clock: Clock = utcnow) -> None:
        self.db = db
        self.config = config
        self.credentials = CredentialStore(db, config, clock)
        self.sessions = SessionManager(db, config, clock)
        self.directory = DirectoryService(db, config)
        self.messaging = MessagingService(db, config, clock)
        self.profiles = ProfileStore(db, clock)

    def _resolve(self, token: TokenLike) -> User:
        return self.sessions.validate(_as_token(token))

    def _check_invite(self, invite_code: str | None) -> None:
        required = self.config.invite_code
        if not required:
            return
        if invite_code is None or not constant_time_equals(invite_code, required):
            raise InvalidInviteError()

    def authenticate(self, email: str, password: str) -> IssuedSession:
        with store_transaction(self.db, "authenticate"):
            user = self.credentials.verify(email, password)
            issued = self.sessions.issue(user.id)
            self.db.commit()
        return issued

    def register(
        self,
        email: str,
        password: str,
        name: str,
        invite_code: str | None = None,
    ) -> IssuedSession:
        """Create an account and log it in.

        The invite check runs before the uniqueness check so a bad invite
        never reveals whether an email is registered.
        """
        with store_transaction(self.db, "register"):
            self.credentials.validate_signup(email, password, name)
            self._check_invite(invite_code)
            user = self.credentials.create(email, password, name)
            issued = self.sessions.issue(user.id)
            self.db.commit()
        return issued

    def current_user(self, token: TokenLike) -> ProfileView:
        with store_transaction(self.db, "current_user"):
            return owner_profile(self._resolve(token))

    def logout(self, token: TokenLike) -> None:
        with store_transaction(self.db, "logout"):
            self.sessions.revoke(_as_token(token))

    def search_directory(
        self,
        token: TokenLike,
        query: str | None = None,
        page: int | str | None = 1,
    ) -> DirectoryPage:
        """Return one redacted page of members.

        ``page`` may be raw query text; it is parsed after the token is accepted.
        """
        with store_transaction(self.db, "search_directory"):
            self._resolve(token)
            result = self.directory.list(query, _as_page(page))
            return DirectoryPage(
                members=[public_profile(user) for user in result.users],
                total=result.total,
                page=result.page,
                total_pages=result.total_pages,
                page_size=result.page_size,
            )

    def view_profile(self, token: TokenLike, user_id: int) -> ProfileView:
        with store_transaction(self.db, "view_profile"):
            viewer = self._resolve(token)
            return profile_for(self.directory.get(user_id), viewer.id)

    def update_own_profile(self, token: TokenLike, update_data: ProfileUpdate) -> ProfileView:
        with store_transaction(self.db, "update_own_profile"):
            user = self._resolve(token)
            self.profiles.update(user, update_data)
            self.db.commit()
            return owner_profile(user)

    def list_conversations(self, token: TokenLike) -> list[ConversationSummary]:
        with store_transaction(self.db, "list_conversations"):
            user = self._resolve(token)
            return [
                ConversationSummary(
                    partner=public_profile(conv.partner),
                    last_message=conv.latest.body,
                    last_message_at=conv.latest.created_at,
                    last_message_sender_id=conv.latest.sender_id,
                )
                for conv in self.messaging.list_conversations(user.id)
            ]

    def get_thread(self, token: TokenLike, partner_id: int) -> ThreadView:
        with store_transaction(self.db, "get_thread"):
            user = self._resolve(token)
            thread = self.messaging.get_thread(user.id, partner_id)
            return ThreadView(
                messages=[MessageView.model_validate(message) for message in thread.messages],
                partner=profile_for(thread.partner, user.id),
            )

    def send_message(self, token: TokenLike, partner_id: int, body: str) -> MessageView:
        with store_transaction(self.db, "send_message"):
            user = self._resolve(token)
            message = self.messaging.send_message(user.id, partner_id, body)
            self.db.commit()
            return MessageView.model_validate(message)
