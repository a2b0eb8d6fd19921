"""Directory and profile endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from huddle.schemas.user import DirectoryPage, ProfileUpdate, ProfileView

from ..dependencies import TokenDep, WorkspaceDep

router = APIRouter(prefix="/users", tags=["users", "directory"])


@router.get("", response_model=DirectoryPage)
def search_members(
    token: TokenDep,
    workspace: WorkspaceDep,
    q: str | None = Query(None, description="Matches name, department or skills"),
    page: str | None = Query(None, description="1-based page number"),
) -> DirectoryPage:
    """List members by name, optionally filtered by a search term."""
    return workspace.search_directory(token, q, page)


@router.put("/me", response_model=ProfileView)
@router.patch("/me", response_model=ProfileView)
def update_my_profile(
    update_data: ProfileUpdate,
    token: TokenDep,
    workspace: WorkspaceDep,
) -> ProfileView:
    """Merge the provided fields onto the caller's profile."""
    return workspace.update_own_profile(token, update_data)


@router.get("/{user_id}", response_model=ProfileView)
def get_member(user_id: int, token: TokenDep, workspace: WorkspaceDep) -> ProfileView:
    """Return one member's profile, honouring their email privacy flag."""
    return workspace.view_profile(token, user_id)
