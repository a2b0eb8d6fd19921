# src/huddle/api/v1/endpoints/auth.py
"""Authentication endpoints for the Huddle API."""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from huddle.core.settings import settings
from huddle.schemas.user import LoginRequest, ProfileView, SessionResponse, SignupRequest
from huddle.services.sessions import IssuedSession

from ..dependencies import TokenDep, WorkspaceDep

router = APIRouter(prefix="/auth", tags=["authentication"])


def _set_session_cookie(response: Response, issued: IssuedSession) -> None:
    """Hand the token to the browser in a cookie scripts cannot read."""
    response.set_cookie(
        key=settings.session_cookie_name,
        value=issued.token.reveal(),
        max_age=settings.session_ttl_days * 24 * 60 * 60,
        expires=issued.expires_at,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )


def _session_response(issued: IssuedSession) -> SessionResponse:
    return SessionResponse(user_id=issued.user_id, expires_at=issued.expires_at)


@router.post("/login", response_model=SessionResponse)
def login(payload: LoginRequest, response: Response, workspace: WorkspaceDep) -> SessionResponse:
    """Authenticate with email and password and start a session."""
    issued = workspace.authenticate(payload.email, payload.password)
    _set_session_cookie(response, issued)
    return _session_response(issued)


@router.post("/signup", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def signup(payload: SignupRequest, response: Response, workspace: WorkspaceDep) -> SessionResponse:
    """Create an account and start a session for it."""
    issued = workspace.register(
        payload.email,
        payload.password,
        payload.name,
        invite_code=payload.invite_code,
    )
    _set_session_cookie(response, issued)
    return _session_response(issued)


@router.post("/logout")
def logout(response: Response, token: TokenDep, workspace: WorkspaceDep) -> dict[str, bool]:
    """End the current session. Succeeds even without a live session."""
    workspace.logout(token)
    response.delete_cookie(
        settings.session_cookie_name,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
    return {"success": True}


@router.get("/me", response_model=ProfileView)
def me(token: TokenDep, workspace: WorkspaceDep) -> ProfileView:
    """Return the caller's own, unredacted profile."""
    return workspace.current_user(token)
