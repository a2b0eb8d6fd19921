"""User-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class LoginRequest(BaseModel):
    """Schema for login submissions."""

    email: EmailStr = Field(..., description="Account email address")
    password: str = Field(..., description="Account password")


class SignupRequest(BaseModel):
    """Schema for account registration."""

    email: EmailStr = Field(..., description="Company email address")
    password: str = Field(..., description="Password (8-128 characters)")
    name: str = Field(..., description="Display name (1-255 characters)")
    invite_code: str | None = Field(
        None,
        alias="inviteCode",
        description="Invite code, required only when the server configures one",
    )

    model_config = ConfigDict(populate_by_name=True)


class SessionResponse(BaseModel):
    """Returned after login or signup; the token itself travels in a cookie."""

    user_id: int = Field(..., description="Authenticated user id")
    expires_at: datetime = Field(..., description="Absolute session expiry (UTC)")


class ProfileUpdate(BaseModel):
    """Partial profile update.

    Only fields present in the request body are applied; see
    ``huddle.services.profiles`` for how explicit nulls are treated and for
    the length limits, which are checked once the caller is authenticated.
    """

    name: str | None = None
    department: str | None = None
    title: str | None = None
    skills: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    show_email: bool | None = None


class ProfileView(BaseModel):
    """Profile as it leaves the core; ``email`` may be redacted to null."""

    id: int
    email: str | None
    name: str
    department: str | None = None
    title: str | None = None
    skills: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    show_email: bool
    last_seen_at: datetime | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DirectoryPage(BaseModel):
    """One page of directory search results."""

    members: list[ProfileView]
    total: int
    page: int
    total_pages: int
    page_size: int
