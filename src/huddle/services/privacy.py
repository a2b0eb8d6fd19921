"""Privacy redaction applied wherever a profile leaves the core."""

from __future__ import annotations

from huddle.models import User
from huddle.schemas.user import ProfileView


def owner_profile(user: User) -> ProfileView:
    """Return the unredacted view; only for the profile's own owner."""
    return ProfileView.model_validate(user)


def public_profile(user: User) -> ProfileView:
    """Return the view any other consumer may see.

    The email is nulled when the owner has opted out of showing it; every
    other field passes through unchanged.
    """
    view = ProfileView.model_validate(user)
    if not user.show_email:
        view = view.model_copy(update={"email": None})
    return view


def profile_for(user: User, viewer_id: int | None) -> ProfileView:
    """Pick the owner or public view depending on who is looking."""
    if viewer_id is not None and viewer_id == user.id:
        return owner_profile(user)
    return public_profile(user)
