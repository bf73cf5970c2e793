from sqlalchemy import Column, String, Text, Boolean, DateTime, Enum, ForeignKey, JSON, Index
from sqlalchemy.orm import relationship
from revistete.models.base import BaseModel
import enum

class NotificationType(str, enum.Enum):
    MESSAGE = "message"
    NEW_FOLLOWER = "new_follower"
    GARMENT_INTEREST = "garment_interest"
    SYSTEM = "system"

class Notification(BaseModel):
    __tablename__ = "notifications"
    __table_args__ = (Index("ix_notifications_user_read_created", "user_id", "is_read", "created_at"),)
    
    user_id = Column(ForeignKey("users.id"), nullable=False, index=True)
    type = Column(Enum(NotificationType, values_callable=lambda e: [m.value for m in e]), default=NotificationType.SYSTEM, nullable=False)
    title = Column(String(200), nullable=False)
    body = Column(Text, nullable=False)
    
    # Optional pointers at whatever triggered the notification
    related_user_id = Column(ForeignKey("users.id"), nullable=True)
    related_garment_id = Column(ForeignKey("posts.id", ondelete="SET NULL"), nullable=True)
    related_conversation_id = Column(ForeignKey("conversations.id"), nullable=True)
    
    is_read = Column(Boolean, default=False, nullable=False)
    read_at = Column(DateTime(timezone=True), nullable=True)
    
    # "metadata" is reserved on declarative classes
    extra_data = Column("metadata", JSON, default=dict, nullable=False)
    
    related_user = relationship("User", foreign_keys=[related_user_id], lazy="joined")
    related_garment = relationship("Post", foreign_keys=[related_garment_id], lazy="joined")
