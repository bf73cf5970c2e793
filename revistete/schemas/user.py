from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from uuid import UUID
from datetime import datetime
from revistete.schemas.common import Envelope, GeoPoint, stripped_non_empty

class UserSummary(BaseModel):
    """Public slice of a user embedded in posts, messages and notifications."""
    id: UUID
    name: str
    email: str
    avatar: Optional[str] = None
    
    model_config = {"from_attributes": True}

class UserContact(UserSummary):
    """Owner details shown on a listing so both parties can arrange the exchange."""
    phone: Optional[str] = None
    address: Optional[str] = None
    location: Optional[GeoPoint] = None

class UserCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)
    phone: str
    address: str
    
    @field_validator('name', mode='before')
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v
    
    @field_validator('phone', 'address')
    @classmethod
    def not_blank(cls, v):
        return stripped_non_empty(v)
    
    @field_validator('email')
    @classmethod
    def lower_email(cls, v):
        return v.lower()

class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)
    
    @field_validator('email')
    @classmethod
    def lower_email(cls, v):
        return v.lower()

class LocationUpdate(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    city: Optional[str] = None
    country: Optional[str] = None

class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=50)
    phone: Optional[str] = None
    address: Optional[str] = None
    location: Optional[LocationUpdate] = None
    
    @field_validator('name', mode='before')
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v
    
    @field_validator('phone', 'address')
    @classmethod
    def not_blank(cls, v):
        return stripped_non_empty(v) if v is not None else v

class UserResponse(BaseModel):
    id: UUID
    name: str
    email: str
    phone: str
    address: str
    location: Optional[GeoPoint] = None
    avatar: Optional[str] = None
    is_active: bool
    created_at: datetime
    
    model_config = {"from_attributes": True}

class TokenResponse(Envelope):
    token: str
    user: UserResponse

class UserEnvelope(Envelope):
    user: UserResponse

