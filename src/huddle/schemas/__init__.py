# src/huddle/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .message import (
    ConversationList,
    ConversationSummary,
    MessageCreate,
    MessageView,
    ThreadView,
)
from .user import (
    DirectoryPage,
    LoginRequest,
    ProfileUpdate,
    ProfileView,
    SessionResponse,
    SignupRequest,
)

__all__ = [
    "ConversationList", "ConversationSummary", "MessageCreate", "MessageView", "ThreadView",
    "DirectoryPage", "LoginRequest", "ProfileUpdate", "ProfileView",
    "SessionResponse", "SignupRequest",
]
