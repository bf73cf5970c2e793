from sqlalchemy import Column, String, Boolean, Text, JSON
from sqlalchemy.orm import relationship
from revistete.models.base import BaseModel

class User(BaseModel):
    __tablename__ = "users"
    
    name = Column(String(50), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)  # always lower-cased
    password_hash = Column(String(255), nullable=False)
    phone = Column(String(30), nullable=False)
    address = Column(Text, nullable=False)
    
    # GeoJSON-style point: {"type": "Point", "coordinates": [lng, lat], "city", "country"}
    location = Column(JSON(none_as_null=True), nullable=True)
    avatar = Column(String(255), nullable=True)
    
    is_active = Column(Boolean, default=True, nullable=False)
    
    from revistete.models.post import Post
    posts = relationship("Post", back_populates="owner", foreign_keys="Post.owner_id")
