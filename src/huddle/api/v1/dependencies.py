"""Shared API dependencies for session authentication and the core facade."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from huddle.core.security import SessionToken
from huddle.core.settings import settings
from huddle.db.session import get_db
from huddle.services.workspace import Workspace

# Browsers send the session cookie; API clients may use a bearer header instead.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_workspace(db: SessionDep) -> Workspace:
    """Bind the core operations to this request's store handle."""
    return Workspace(db)


def get_session_token(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> SessionToken | None:
    """Extract the caller's session token, if any.

    The cookie wins over the header. Validation is left to the session
    manager so that every token-bearing operation resolves it first.
    """
    raw = request.cookies.get(settings.session_cookie_name)
    if not raw and credentials is not None:
        raw = credentials.credentials
    return SessionToken(raw) if raw else None


WorkspaceDep = Annotated[Workspace, Depends(get_workspace)]
TokenDep = Annotated[SessionToken | None, Depends(get_session_token)]
