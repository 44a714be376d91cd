from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, get_args

from pydantic import BaseModel, Field

from schemas.common import Money

OrderStatus = Literal["pending", "confirmed", "shipped", "delivered", "cancelled"]

ORDER_STATUSES = get_args(OrderStatus)


class OrderItem(BaseModel):
    product_id: str
    quantity: int = Field(gt=0)
    price: Money


class OrderIn(BaseModel):
    store_id: str
    items: List[OrderItem] = Field(min_length=1)
    shipping_address: Optional[Dict[str, Any]] = None
    notes: Optional[str] = None


class OrderCreate(BaseModel):
    order_number: str
    customer_id: str
    store_id: str
    status: OrderStatus = "pending"
    total_amount: Money
    items: List[OrderItem]
    shipping_address: Optional[Dict[str, Any]] = None
    notes: Optional[str] = None


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderOut(OrderCreate):
    id: str
    created_at: datetime

    class Config:
        from_attributes = True
