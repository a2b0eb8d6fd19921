"""Engine, session factory and SQLite connection setup."""

from __future__ import annotations

import sqlite3
from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from huddle.core.settings import settings

# Unicode-aware case folding for SQLite, called as func.casefold(...).
CASEFOLD_FUNCTION = "casefold"


class Base(DeclarativeBase):
    """Declarative base for Huddle's users, sessions and messages tables."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import huddle.models  # noqa: E402,F401


def _casefold(value: str | None) -> str | None:
    return value.casefold() if value is not None else None


@event.listens_for(Engine, "connect")
def _register_sqlite_functions(dbapi_connection: Any, connection_record: Any) -> None:
    # SQLite's lower() and LIKE only fold ASCII letters.
    if isinstance(dbapi_connection, sqlite3.Connection):
        dbapi_connection.create_function(CASEFOLD_FUNCTION, 1, _casefold, deterministic=True)


def is_sqlite_url(url: str) -> bool:
    return url.startswith("sqlite")


def build_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine; SQLite connections may be shared across threadpool workers."""
    connect_args = {"check_same_thread": False} if is_sqlite_url(url) else {}
    return create_engine(url, pool_pre_ping=True, echo=echo, connect_args=connect_args)


engine = build_engine(settings.effective_database_url, echo=settings.sql_debug)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield one store handle per request and close it afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    """Create the users, sessions and messages tables if missing."""
    Base.metadata.create_all(bind=engine)


def drop_tables() -> None:
    """Drop every Huddle table."""
    Base.metadata.drop_all(bind=engine)
