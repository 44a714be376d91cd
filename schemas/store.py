from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from schemas.users import UserOut

STORE_NAME_MAX_LENGTH = 150

DEFAULT_WORKING_DAYS = ["sunday", "monday", "tuesday", "wednesday", "thursday"]


def default_store_settings() -> Dict[str, Any]:
    return {
        "category": "",
        "address": "",
        "open_time": "09:00",
        "close_time": "22:00",
        "working_days": list(DEFAULT_WORKING_DAYS),
    }


class StoreIn(BaseModel):
    name: str = Field(min_length=1, max_length=STORE_NAME_MAX_LENGTH)
    description: Optional[str] = None
    settings: Dict[str, Any] = Field(default_factory=dict)


class StoreCreate(StoreIn):
    owner_id: str
    is_active: bool = True


class StoreUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=STORE_NAME_MAX_LENGTH)
    description: Optional[str] = None
    # Merged key by key into the stored settings blob
    settings: Optional[Dict[str, Any]] = None


class AdminStoreUpdate(StoreUpdate):
    is_active: Optional[bool] = None


class StoreOut(StoreCreate):
    id: str
    created_at: datetime

    class Config:
        from_attributes = True


class StoreWithOwner(StoreOut):
    owner: Optional[UserOut] = None
