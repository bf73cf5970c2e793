from sqlalchemy import Column, String, Integer, Boolean, Text, Enum, ForeignKey, JSON
from sqlalchemy.orm import relationship
from revistete.models.base import BaseModel
import enum

class GarmentCategory(str, enum.Enum):
    TSHIRTS = "camisetas"
    TROUSERS = "pantalones"
    DRESSES = "vestidos"
    COATS = "abrigos"
    SHOES = "zapatos"
    ACCESSORIES = "accesorios"

class GarmentSize(str, enum.Enum):
    XS = "XS"
    S = "S"
    M = "M"
    L = "L"
    XL = "XL"
    XXL = "XXL"

class GarmentGender(str, enum.Enum):
    MEN = "hombre"
    WOMEN = "mujer"
    UNISEX = "unisex"
    BOY = "niño"
    GIRL = "niña"

class GarmentState(str, enum.Enum):
    NEW = "new"
    USED = "used"

class Post(BaseModel):
    __tablename__ = "posts"
    
    # Basic Info
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(Enum(GarmentCategory, values_callable=lambda e: [m.value for m in e]), nullable=False, index=True)
    size = Column(Enum(GarmentSize, values_callable=lambda e: [m.value for m in e]), nullable=False)
    gender = Column(Enum(GarmentGender, values_callable=lambda e: [m.value for m in e]), nullable=False)
    state = Column(Enum(GarmentState, values_callable=lambda e: [m.value for m in e]), default=GarmentState.USED, nullable=False)
    
    # Media: ordered list of public image URLs
    photos = Column(JSON, default=list, nullable=False)
    
    # {"type": "Point", "coordinates": [lng, lat], "city", "country", "address"}
    location = Column(JSON(none_as_null=True), nullable=True)
    
    # Relationships
    owner_id = Column(ForeignKey("users.id"), nullable=False, index=True)
    owner = relationship("User", back_populates="posts", foreign_keys=[owner_id], lazy="joined")
    
    # Availability / engagement
    is_available = Column(Boolean, default=True, nullable=False, index=True)
    is_featured = Column(Boolean, default=False, nullable=False)
    views = Column(Integer, default=0, nullable=False)
