from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session
from revistete.core.database import get_db
from revistete.models.user import User
from revistete.schemas.message import (
    DirectMessageCreate, MessageCreate, MessageResponse, ConversationSummary,
    SentMessageResponse, ConversationListResponse, MessageListResponse,
)
from revistete.services import messaging, notifications
from revistete.api.deps import get_current_active_user
from uuid import UUID

router = APIRouter(prefix="/messages", tags=["Messages"])


def _send(
    db: Session,
    background_tasks: BackgroundTasks,
    sender: User,
    text: str,
    **target,
) -> SentMessageResponse:
    message, conversation, recipient_id = messaging.send_message(db, sender, text, **target)

    # Runs after the response is sent; a failure there is logged, never surfaced.
    background_tasks.add_task(
        notifications.deliver_message_notification,
        recipient_id,
        sender.id,
        sender.name,
        conversation.id,
        message.body,
    )
    return SentMessageResponse(
        message=MessageResponse.model_validate(message),
        conversation_id=conversation.id,
    )


@router.post("", response_model=SentMessageResponse, status_code=status.HTTP_201_CREATED)
async def send_direct_message(
    payload: DirectMessageCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Message a user directly; opens the conversation on first contact."""
    return _send(db, background_tasks, current_user, payload.message, recipient_id=payload.recipient_id)


@router.get("/conversations", response_model=ConversationListResponse)
async def get_conversations(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    rows = messaging.list_conversations(db, current_user.id)
    return ConversationListResponse(
        conversations=[ConversationSummary.model_validate(row, from_attributes=True) for row in rows]
    )


@router.post("/{conversation_id}", response_model=SentMessageResponse, status_code=status.HTTP_201_CREATED)
async def send_conversation_message(
    conversation_id: UUID,
    payload: MessageCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Reply inside an existing conversation; the recipient is the other participant."""
    return _send(db, background_tasks, current_user, payload.message, conversation_id=conversation_id)


@router.get("/{conversation_id}", response_model=MessageListResponse)
async def get_messages(
    conversation_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Messages oldest first. Reading marks the other party's messages as read."""
    messages = messaging.list_messages(db, conversation_id, current_user.id)
    return MessageListResponse(messages=[MessageResponse.model_validate(m) for m in messages])
