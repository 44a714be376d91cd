from typing import List

from fastapi import APIRouter, Depends

from core.access import get_current_user, get_storage, require_self_or_admin
from schemas.dashboard import DashboardStats
from schemas.order import OrderOut
from schemas.users import UserRecord
from storage import Storage

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats/{user_id}", response_model=DashboardStats)
def dashboard_stats(
    user_id: str,
    current_user: UserRecord = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    """Store, product and order totals for a merchant. Cancelled orders earn nothing."""
    require_self_or_admin(user_id, current_user)
    return storage.get_dashboard_stats(user_id)


@router.get("/orders/{user_id}", response_model=List[OrderOut])
def dashboard_orders(
    user_id: str,
    current_user: UserRecord = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    require_self_or_admin(user_id, current_user)
    orders = storage.get_orders_by_merchant(user_id)
    return sorted(orders, key=lambda order: (order.created_at, order.id), reverse=True)
