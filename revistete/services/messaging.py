"""Two-party conversations and their messages.

A conversation row exists only once a first message has been sent between
two users. The find-or-create step is a read followed by a conditional
insert with no lock, so two simultaneous first messages between the same
pair can produce two conversations. Message order inside a conversation is
``created_at`` only.
"""

import logging
from typing import List, Optional, Tuple
from uuid import UUID
from sqlalchemy import or_, and_
from sqlalchemy.orm import Session
from revistete.core.errors import AuthorizationError, NotFoundError, ValidationError
from revistete.models.base import utcnow
from revistete.models.message import Conversation, Message
from revistete.models.user import User
from revistete.schemas.message import MAX_MESSAGE_LENGTH

logger = logging.getLogger(__name__)


def validate_body(text: Optional[str]) -> str:
    body = (text or "").strip()
    if not body:
        raise ValidationError("Message cannot be empty")
    if len(body) > MAX_MESSAGE_LENGTH:
        raise ValidationError(f"Message cannot exceed {MAX_MESSAGE_LENGTH} characters")
    return body


def get_participant_conversation(db: Session, conversation_id: UUID, user_id: UUID) -> Conversation:
    conversation = db.query(Conversation).filter(Conversation.id == conversation_id).first()
    if not conversation:
        raise NotFoundError("Conversation not found")
    if not conversation.has_participant(user_id):
        raise AuthorizationError("You do not have access to this conversation")
    return conversation


def find_conversation(db: Session, user_a: UUID, user_b: UUID) -> Optional[Conversation]:
    """Match on both participants being present, whichever slot each one is in."""
    return db.query(Conversation).filter(
        or_(
            and_(Conversation.participant_one_id == user_a, Conversation.participant_two_id == user_b),
            and_(Conversation.participant_one_id == user_b, Conversation.participant_two_id == user_a),
        )
    ).order_by(Conversation.created_at.asc()).first()


def find_or_create_conversation(db: Session, sender_id: UUID, recipient_id: UUID) -> Conversation:
    conversation = find_conversation(db, sender_id, recipient_id)
    if conversation:
        return conversation

    conversation = Conversation(participant_one_id=sender_id, participant_two_id=recipient_id)
    db.add(conversation)
    db.flush()
    logger.info("Conversation created", extra={"conversation_id": conversation.id, "user_id": sender_id})
    return conversation


def send_message(
    db: Session,
    sender: User,
    text: Optional[str],
    recipient_id: Optional[UUID] = None,
    conversation_id: Optional[UUID] = None,
) -> Tuple[Message, Conversation, UUID]:
    """Store a message from ``sender``.

    The recipient comes from ``conversation_id`` (the other participant) when
    given, otherwise from ``recipient_id``. Returns the stored message, its
    conversation and the recipient id; notifying the recipient is left to
    the caller.
    """
    if conversation_id is not None:
        conversation = get_participant_conversation(db, conversation_id, sender.id)
        other = conversation.other_participant(sender.id)
        recipient_id = other.id if other else None
    else:
        conversation = None

    if recipient_id is None:
        raise ValidationError("Recipient is required")

    body = validate_body(text)

    if recipient_id == sender.id:
        raise ValidationError("You cannot send a message to yourself")

    if conversation is None:
        recipient = db.query(User).filter(User.id == recipient_id).first()
        if not recipient:
            raise NotFoundError("Recipient not found")
        conversation = find_or_create_conversation(db, sender.id, recipient_id)

    message = Message(conversation_id=conversation.id, sender_id=sender.id, body=body)
    db.add(message)
    db.flush()

    conversation.last_message_id = message.id
    conversation.last_message_at = message.created_at or utcnow()
    db.commit()
    db.refresh(message)

    logger.info("Message sent", extra={"conversation_id": conversation.id, "user_id": sender.id})
    return message, conversation, recipient_id


def list_conversations(db: Session, user_id: UUID) -> List[dict]:
    conversations = db.query(Conversation).filter(
        or_(
            Conversation.participant_one_id == user_id,
            Conversation.participant_two_id == user_id,
        )
    ).order_by(Conversation.last_message_at.desc()).all()

    rows = []
    for conversation in conversations:
        rows.append({
            "id": conversation.id,
            "participant": conversation.other_participant(user_id),
            "last_message": conversation.last_message.body if conversation.last_message else "",
            "last_message_at": conversation.last_message_at,
            "unread": 0,
        })
    return rows


def list_messages(db: Session, conversation_id: UUID, user_id: UUID) -> List[Message]:
    """Messages oldest first. Marks the other party's unread messages as read."""
    get_participant_conversation(db, conversation_id, user_id)

    # Already-read rows are excluded so read_at is stamped once.
    db.query(Message).filter(
        Message.conversation_id == conversation_id,
        Message.sender_id != user_id,
        Message.is_read.is_(False),
    ).update(
        {Message.is_read: True, Message.read_at: utcnow()},
        synchronize_session=False,
    )
    db.commit()

    return db.query(Message).filter(
        Message.conversation_id == conversation_id
    ).order_by(Message.created_at.asc()).all()
