"""Profile store: partial updates to the caller's own profile."""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from huddle.core.errors import ValidationError
from huddle.db.time import Clock, utcnow
from huddle.models import User
from huddle.schemas.user import ProfileUpdate

logger = logging.getLogger(__name__)

# Free-text fields an owner may clear by sending "" or null.
CLEARABLE_FIELDS = ("department", "title", "skills", "bio", "avatar_url")

MAX_LENGTHS = {
    "name": 255,
    "department": 255,
    "title": 255,
    "skills": 1000,
    "bio": 2000,
    "avatar_url": 2048,
}


class ProfileStore:
    """Applies "set if provided" merges onto a user row."""

    def __init__(self, db: Session, clock: Clock = utcnow) -> None:
        self.db = db
        self.clock = clock

    def update(self, user: User, update_data: ProfileUpdate) -> User:
        """Apply the fields present in ``update_data`` and keep the rest.

        Presence is decided by pydantic's ``exclude_unset``: a field left out
        of the payload keeps its stored value, while a field sent as ``""`` or
        ``null`` is cleared. ``name`` and ``show_email`` cannot be cleared.
        Concurrent updates resolve last-write-wins.

        Raises:
            ValidationError: If ``name`` is blank, a required flag is null or
                a text field is over its length limit.
        """
        changes = update_data.model_dump(exclude_unset=True)

        if "name" in changes:
            name = (changes["name"] or "").strip()
            if not name:
                raise ValidationError("Name is required")
            changes["name"] = name

        if "show_email" in changes and changes["show_email"] is None:
            raise ValidationError("show_email must be true or false")

        for key in CLEARABLE_FIELDS:
            if key in changes and not changes[key]:
                changes[key] = None

        for key, limit in MAX_LENGTHS.items():
            value = changes.get(key)
            if value is not None and len(value) > limit:
                label = key.replace("_", " ").capitalize()
                raise ValidationError(f"{label} is too long", details={"max_length": limit})

        for key, value in changes.items():
            setattr(user, key, value)
        user.updated_at = self.clock()

        self.db.add(user)
        self.db.flush()
        logger.info("Updated profile user_id=%s fields=%s", user.id, sorted(changes))
        return user
