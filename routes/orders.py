from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from core.access import check_store_access, get_current_user, get_owned_store, get_storage
from schemas.order import OrderIn, OrderOut, OrderStatusUpdate
from schemas.users import UserRecord
from services.orders import change_order_status, place_order
from storage import Storage

router = APIRouter(prefix="/orders", tags=["orders"])


def _can_manage(storage: Storage, user: UserRecord, order: OrderOut) -> bool:
    store = storage.get_store(order.store_id)
    return store is not None and check_store_access(user, store)


def _get_visible_order(storage: Storage, order_id: str, user: UserRecord) -> OrderOut:
    order = storage.get_order(order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    if order.customer_id != user.id and not _can_manage(storage, user, order):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to view this order")
    return order


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    data: OrderIn,
    current_user: UserRecord = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return place_order(storage, current_user.id, data)


@router.get("/mine", response_model=List[OrderOut])
def list_my_orders(current_user: UserRecord = Depends(get_current_user), storage: Storage = Depends(get_storage)):
    return storage.get_orders_by_customer(current_user.id)


@router.get("/store/{store_id}", response_model=List[OrderOut])
def list_store_orders(
    store_id: str,
    current_user: UserRecord = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    store = get_owned_store(storage, store_id, current_user)
    return storage.get_orders_by_store(store.id)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: str,
    current_user: UserRecord = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return _get_visible_order(storage, order_id, current_user)


@router.patch("/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: str,
    data: OrderStatusUpdate,
    current_user: UserRecord = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    order = _get_visible_order(storage, order_id, current_user)
    # Customers may only cancel their own orders
    if not _can_manage(storage, current_user, order) and data.status != "cancelled":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the store can change this status")
    updated = change_order_status(storage, order.id, data.status)
    if not updated:
        raise HTTPException(status_code=404, detail="Order not found")
    return updated
