from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from schemas.common import Money, NaiveUtcDatetime

AdType = Literal["sale", "rent", "wanted", "service"]


class AdIn(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    category: str = Field(min_length=1, max_length=100)
    type: AdType
    price: Optional[Money] = None
    location: Optional[str] = None
    contact_name: str = Field(min_length=1, max_length=150)
    contact_phone: str = Field(min_length=1, max_length=50)
    contact_email: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    is_premium: bool = False
    expires_at: Optional[NaiveUtcDatetime] = None
    is_active: bool = True


class AdCreate(AdIn):
    poster_id: str


class AdUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[AdType] = None
    price: Optional[Money] = None
    location: Optional[str] = None
    contact_name: Optional[str] = Field(None, min_length=1, max_length=150)
    contact_phone: Optional[str] = Field(None, min_length=1, max_length=50)
    contact_email: Optional[str] = None
    images: Optional[List[str]] = None
    is_premium: Optional[bool] = None
    expires_at: Optional[NaiveUtcDatetime] = None
    is_active: Optional[bool] = None


class AdOut(AdCreate):
    id: str
    created_at: datetime

    class Config:
        from_attributes = True
