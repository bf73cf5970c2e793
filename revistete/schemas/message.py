from pydantic import BaseModel
from typing import Optional, List
from uuid import UUID
from datetime import datetime
from revistete.schemas.common import Envelope
from revistete.schemas.user import UserSummary

MAX_MESSAGE_LENGTH = 1000


class MessageCreate(BaseModel):
    """Body for ``POST /messages/{conversation_id}``; length rules are enforced by the service."""
    message: str


class DirectMessageCreate(MessageCreate):
    """Body for ``POST /messages``: first contact goes through the recipient id."""
    recipient_id: UUID


class MessageResponse(BaseModel):
    id: UUID
    conversation_id: UUID
    sender_id: UUID
    sender: Optional[UserSummary] = None
    body: str
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class ConversationSummary(BaseModel):
    id: UUID
    participant: UserSummary
    last_message: str = ""
    last_message_at: datetime
    # Per-conversation unread tally is not computed yet; always 0.
    unread: int = 0


class SentMessageResponse(Envelope):
    message: MessageResponse
    conversation_id: UUID


class ConversationListResponse(Envelope):
    conversations: List[ConversationSummary]


class MessageListResponse(Envelope):
    messages: List[MessageResponse]
