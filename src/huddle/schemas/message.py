# src/huddle/schemas/message.py
"""Direct message-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from huddle.schemas.user import ProfileView


class MessageCreate(BaseModel):
    """Schema for sending a direct message."""

    body: str = Field(..., description="Plain-text message body (1-5000 characters)")


class MessageView(BaseModel):
    """A single persisted message."""

    id: int
    sender_id: int
    receiver_id: int
    body: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ThreadView(BaseModel):
    """Full bidirectional history with one partner, oldest first."""

    messages: list[MessageView]
    partner: ProfileView


class ConversationSummary(BaseModel):
    """Latest message exchanged with one counterpart."""

    partner: ProfileView
    last_message: str
    last_message_at: datetime
    last_message_sender_id: int


class ConversationList(BaseModel):
    """Inbox listing, most recent conversation first."""

    conversations: list[ConversationSummary]
