from sqlalchemy import Column, Text, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from revistete.models.base import BaseModel, utcnow

class Conversation(BaseModel):
    """Two-party thread. Created lazily by the first message between a pair.

    There is no unique constraint on the participant pair: lookup-then-create
    can race and produce two rows for the same pair.
    """
    __tablename__ = "conversations"
    
    participant_one_id = Column(ForeignKey("users.id"), nullable=False, index=True)
    participant_two_id = Column(ForeignKey("users.id"), nullable=False, index=True)
    
    last_message_id = Column(ForeignKey("messages.id", use_alter=True, name="fk_conversation_last_message"), nullable=True)
    last_message_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    
    participant_one = relationship("User", foreign_keys=[participant_one_id], lazy="joined")
    participant_two = relationship("User", foreign_keys=[participant_two_id], lazy="joined")
    last_message = relationship("Message", foreign_keys=[last_message_id], post_update=True)
    
    @property
    def participant_ids(self):
        return (self.participant_one_id, self.participant_two_id)
    
    def has_participant(self, user_id) -> bool:
        return user_id in self.participant_ids
    
    def other_participant(self, user_id):
        if self.participant_one_id == user_id:
            return self.participant_two
        return self.participant_one

class Message(BaseModel):
    __tablename__ = "messages"
    __table_args__ = (Index("ix_messages_conversation_created", "conversation_id", "created_at"),)
    
    conversation_id = Column(ForeignKey("conversations.id"), nullable=False)
    sender_id = Column(ForeignKey("users.id"), nullable=False)
    body = Column(Text, nullable=False)
    
    is_read = Column(Boolean, default=False, nullable=False)
    read_at = Column(DateTime(timezone=True), nullable=True)
    
    sender = relationship("User", foreign_keys=[sender_id], lazy="joined")
