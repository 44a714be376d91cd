from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field

Role = Literal["customer", "merchant", "admin"]


class UserCreate(BaseModel):
    """Fields persisted for a new user. The password is already hashed."""

    username: str = Field(min_length=3, max_length=100)
    email: EmailStr
    password_hash: str
    full_name: str = Field(min_length=1, max_length=200)
    phone: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    role: Role = "customer"
    is_active: bool = True


class UserRecord(UserCreate):
    id: str
    created_at: datetime

    class Config:
        from_attributes = True


class UserOut(BaseModel):
    id: str
    username: str
    email: EmailStr
    full_name: str
    phone: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    role: Role
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    full_name: Optional[str] = Field(None, min_length=1, max_length=200)
    phone: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None


class AdminUserCreate(BaseModel):
    username: str = Field(min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    full_name: str = Field(min_length=1, max_length=200)
    phone: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    role: Role = "customer"
    is_active: bool = True


class AdminUserUpdate(UserUpdate):
    role: Optional[Role] = None
    is_active: Optional[bool] = None
