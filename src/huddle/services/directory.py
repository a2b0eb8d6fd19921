"""Directory search over member profiles."""
from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from huddle.core.errors import NotFound, ValidationError
from huddle.core.settings import Settings, settings
from huddle.models import User

LIKE_ESCAPE = "\\"


@dataclass(frozen=True)
class DirectoryResult:
    """Raw page of users; profiles are redacted by the caller's boundary."""

    users: Sequence[User]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size)


def _escape_like(term: str) -> str:
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )


def search_predicate(query: str, dialect_name: str | None = None) -> ColumnElement[bool]:
    """Case-insensitive substring match on name, department or skills.

    SQLite folds only ASCII, so there both sides go through the
    ``casefold`` function registered on each connection. Other backends use
    ``ILIKE``.
    """
    columns = (User.name, User.department, User.skills)
    if dialect_name == "sqlite":
        pattern = f"%{_escape_like(query.casefold())}%"
        return or_(
            *(
                func.casefold(column).like(pattern, escape=LIKE_ESCAPE) for column in columns
            )
        )
    pattern = f"%{_escape_like(query)}%"
    return or_(*(column.ilike(pattern, escape=LIKE_ESCAPE) for column in columns))


class DirectoryService:
    """Paginated, filtered listing of members."""

    def __init__(self, db: Session, config: Settings = settings) -> None:
        self.db = db
        self.page_size = config.directory_page_size

    def list(self, query: str | None = None, page: int = 1) -> DirectoryResult:
        """Return one page of members ordered by name.

        ``total`` counts every match regardless of page; a page past the end
        is empty rather than an error.

        Raises:
            ValidationError: If ``page`` is below 1.
        """
        if page < 1:
            raise ValidationError("Page must be 1 or greater")

        base = self.db.query(User)
        term = (query or "").strip()
        if term:
            base = base.filter(search_predicate(term, self.db.get_bind().dialect.name))

        total = base.with_entities(func.count(User.id)).scalar() or 0
        users = (
            base.order_by(User.name.asc(), User.id.asc())
            .offset((page - 1) * self.page_size)
            .limit(self.page_size)
            .all()
        )
        return DirectoryResult(users=users, total=int(total), page=page, page_size=self.page_size)

    def get(self, user_id: int) -> User:
        """Return a single member.

        Raises:
            NotFound: If no user has this id.
        """
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFound()
        return user
