from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from core.access import get_storage, require_admin
from core.logging import get_logger
from routes.stores import store_updates, with_owner
from schemas.dashboard import PlatformStats
from schemas.order import OrderOut, OrderStatusUpdate
from schemas.store import AdminStoreUpdate, StoreWithOwner
from schemas.users import AdminUserCreate, AdminUserUpdate, Role, UserOut, UserRecord
from services.accounts import create_user_as_admin
from services.orders import change_order_status
from storage import Storage

logger = get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def _public(user: UserRecord) -> UserOut:
    return UserOut.model_validate(user, from_attributes=True)


@router.get("/users", response_model=List[UserOut])
def list_users(role: Optional[Role] = None, storage: Storage = Depends(get_storage)):
    return [_public(user) for user in storage.list_users(role)]


@router.post("/users", response_model=UserOut, status_code=201)
def create_user(data: AdminUserCreate, storage: Storage = Depends(get_storage)):
    return _public(create_user_as_admin(storage, data))


@router.patch("/users/{user_id}", response_model=UserOut)
def update_user(
    user_id: str,
    data: AdminUserUpdate,
    storage: Storage = Depends(get_storage),
    admin: UserRecord = Depends(require_admin),
):
    updates = data.model_dump(exclude_unset=True)
    if user_id == admin.id and (updates.get("role") not in (None, "admin") or updates.get("is_active") is False):
        raise HTTPException(status_code=400, detail="You cannot demote or disable your own account")
    if updates.get("email"):
        updates["email"] = updates["email"].lower()
    user = storage.update_user(user_id, updates)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    logger.info("Admin %s updated user %s: %s", admin.id, user_id, sorted(updates))
    return _public(user)


@router.delete("/users/{user_id}", status_code=204)
def delete_user(
    user_id: str,
    storage: Storage = Depends(get_storage),
    admin: UserRecord = Depends(require_admin),
):
    if user_id == admin.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")
    if not storage.delete_user(user_id):
        raise HTTPException(status_code=404, detail="User not found")
    logger.info("Admin %s deleted user %s", admin.id, user_id)
    return None


@router.get("/stores", response_model=List[StoreWithOwner])
def list_stores(storage: Storage = Depends(get_storage)):
    return [with_owner(storage, store) for store in storage.list_stores()]


@router.patch("/stores/{store_id}", response_model=StoreWithOwner)
def update_store(store_id: str, data: AdminStoreUpdate, storage: Storage = Depends(get_storage)):
    store = storage.get_store(store_id)
    if not store:
        raise HTTPException(status_code=404, detail="Store not found")
    updated = storage.update_store(store.id, store_updates(store, data))
    if not updated:
        raise HTTPException(status_code=404, detail="Store not found")
    return with_owner(storage, updated)


@router.delete("/stores/{store_id}", status_code=204)
def delete_store(store_id: str, storage: Storage = Depends(get_storage)):
    if not storage.delete_store(store_id):
        raise HTTPException(status_code=404, detail="Store not found")
    return None


@router.get("/orders", response_model=List[OrderOut])
def list_orders(storage: Storage = Depends(get_storage)):
    return storage.list_orders()


@router.patch("/orders/{order_id}", response_model=OrderOut)
def update_order(order_id: str, data: OrderStatusUpdate, storage: Storage = Depends(get_storage)):
    order = change_order_status(storage, order_id, data.status)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@router.get("/analytics", response_model=PlatformStats)
def analytics(storage: Storage = Depends(get_storage)):
    return storage.get_platform_stats()
