# src/huddle/services/__init__.py
"""Business logic services for the Huddle application."""

from .credentials import CredentialStore
from .directory import DirectoryService
from .messaging import MessagingService
from .profiles import ProfileStore
from .sessions import IssuedSession, SessionManager
from .workspace import Workspace

__all__ = [
    "CredentialStore",
    "DirectoryService",
    "IssuedSession",
    "MessagingService",
    "ProfileStore",
    "SessionManager",
    "Workspace",
]
