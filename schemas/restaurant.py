from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from schemas.common import Money, Rating


class RestaurantIn(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    cuisine: str = Field(min_length=1, max_length=100)
    address: str = Field(min_length=1)
    phone: Optional[str] = None
    email: Optional[str] = None
    rating: Optional[Rating] = None
    open_hours: Optional[str] = None
    delivery_price: Optional[Money] = None
    min_order_amount: Optional[Money] = None
    image: Optional[str] = None
    is_active: bool = True


class RestaurantCreate(RestaurantIn):
    owner_id: str


class RestaurantUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    cuisine: Optional[str] = Field(None, min_length=1, max_length=100)
    address: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = None
    email: Optional[str] = None
    rating: Optional[Rating] = None
    open_hours: Optional[str] = None
    delivery_price: Optional[Money] = None
    min_order_amount: Optional[Money] = None
    image: Optional[str] = None
    is_active: Optional[bool] = None


class RestaurantOut(RestaurantCreate):
    id: str
    created_at: datetime

    class Config:
        from_attributes = True
