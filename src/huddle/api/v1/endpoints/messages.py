# src/huddle/api/v1/endpoints/messages.py
"""Direct message endpoints for the Huddle API."""

from __future__ import annotations

from fastapi import APIRouter, status

from huddle.schemas.message import ConversationList, MessageCreate, MessageView, ThreadView

from ..dependencies import TokenDep, WorkspaceDep

router = APIRouter(prefix="/messages", tags=["messages"])


@router.get("/conversations", response_model=ConversationList)
def list_conversations(token: TokenDep, workspace: WorkspaceDep) -> ConversationList:
    """List conversation partners with the latest message of each."""
    return ConversationList(conversations=workspace.list_conversations(token))


@router.get("/thread/{user_id}", response_model=ThreadView)
def get_thread(user_id: int, token: TokenDep, workspace: WorkspaceDep) -> ThreadView:
    """Return the full history with ``user_id``, oldest first."""
    return workspace.get_thread(token, user_id)


@router.post(
    "/thread/{user_id}",
    response_model=MessageView,
    status_code=status.HTTP_201_CREATED,
)
def send_message(
    user_id: int,
    message_data: MessageCreate,
    token: TokenDep,
    workspace: WorkspaceDep,
) -> MessageView:
    """Send a plain-text message to ``user_id``."""
    return workspace.send_message(token, user_id, message_data.body)
