from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

class UserBase(BaseModel):
    email: EmailStr

class UserCreate(UserBase):
    password: str = Field(..., min_length=1, description="Plaintext password, hashed before storage")

class UserLogin(UserBase):
    password: str

class UserProfile(UserBase):
    id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
