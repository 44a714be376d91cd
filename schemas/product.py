from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from schemas.common import Money


class ProductCreate(BaseModel):
    store_id: str
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    price: Money
    category: str = Field(min_length=1, max_length=100)
    stock: int = Field(0, ge=0)
    weight: Optional[str] = None
    dimensions: Optional[Dict[str, Any]] = None
    specifications: Optional[Dict[str, Any]] = None
    tags: Optional[List[str]] = None
    is_active: bool = True
    image: Optional[str] = None


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[Money] = None
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    stock: Optional[int] = Field(None, ge=0)
    weight: Optional[str] = None
    dimensions: Optional[Dict[str, Any]] = None
    specifications: Optional[Dict[str, Any]] = None
    tags: Optional[List[str]] = None
    is_active: Optional[bool] = None
    image: Optional[str] = None


class ProductOut(ProductCreate):
    id: str
    created_at: datetime

    class Config:
        from_attributes = True
