"""Translation of storage faults into the core error taxonomy."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from huddle.core.errors import InternalError

logger = logging.getLogger(__name__)


@contextmanager
def store_transaction(db: Session, action: str) -> Iterator[Session]:
    """Run one core operation as a single store transaction.

    Storage faults roll the transaction back and surface as ``InternalError``.
    Nothing is retried: writes are not safely replayable.
    """
    try:
        yield db
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Storage failure during %s", action)
        raise InternalError() from exc
