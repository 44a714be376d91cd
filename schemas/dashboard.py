from decimal import Decimal
from typing import Dict

from pydantic import BaseModel


class DashboardStats(BaseModel):
    store_count: int
    total_products: int
    active_products: int
    total_orders: int
    orders_by_status: Dict[str, int]
    # Cancelled orders never count towards revenue
    total_sales: Decimal


class PlatformStats(BaseModel):
    total_users: int
    users_by_role: Dict[str, int]
    total_stores: int
    active_stores: int
    total_products: int
    total_orders: int
    orders_by_status: Dict[str, int]
    total_revenue: Decimal
