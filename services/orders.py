"""
Order lifecycle: placement, order numbers and status transitions.

    pending -> confirmed -> shipped -> delivered
    pending | confirmed | shipped -> cancelled

Delivered and cancelled are terminal.
"""
import secrets
import string
from decimal import Decimal
from typing import Dict, FrozenSet, Optional

from core.logging import get_logger
from schemas.common import CENTS
from schemas.order import OrderCreate, OrderIn, OrderOut
from storage import IntegrityViolation, Storage

logger = get_logger(__name__)

ORDER_NUMBER_PREFIX = "ORD-"
ORDER_NUMBER_ALPHABET = string.ascii_uppercase + string.digits
ORDER_NUMBER_LENGTH = 8
ORDER_NUMBER_ATTEMPTS = 5

ORDER_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    "pending": frozenset({"confirmed", "cancelled"}),
    "confirmed": frozenset({"shipped", "cancelled"}),
    "shipped": frozenset({"delivered", "cancelled"}),
    "delivered": frozenset(),
    "cancelled": frozenset(),
}


class OrderError(Exception):
    pass


class InvalidTransition(OrderError):
    def __init__(self, current: str, target: str):
        super().__init__(f"Cannot change order status from {current} to {target}")
        self.current = current
        self.target = target


class OrderNumberExhausted(OrderError):
    pass


def generate_order_number() -> str:
    suffix = "".join(secrets.choice(ORDER_NUMBER_ALPHABET) for _ in range(ORDER_NUMBER_LENGTH))
    return f"{ORDER_NUMBER_PREFIX}{suffix}"


def can_transition(current: str, target: str) -> bool:
    return target == current or target in ORDER_TRANSITIONS.get(current, frozenset())


def order_total(data: OrderIn) -> Decimal:
    total = sum((item.price * item.quantity for item in data.items), Decimal("0"))
    return total.quantize(CENTS)


def place_order(storage: Storage, customer_id: str, data: OrderIn) -> OrderOut:
    """Create a pending order; the total is computed from the line items.

    Line items are stored as submitted and not checked against the
    store's current catalog.
    """
    store = storage.get_store(data.store_id)
    if store is None or not store.is_active:
        raise IntegrityViolation("Store does not exist or is inactive")

    total = order_total(data)
    for attempt in range(1, ORDER_NUMBER_ATTEMPTS + 1):
        order_number = generate_order_number()
        if storage.get_order_by_number(order_number) is not None:
            logger.warning("Order number collision on attempt %d: %s", attempt, order_number)
            continue
        order = storage.create_order(
            OrderCreate(
                order_number=order_number,
                customer_id=customer_id,
                store_id=data.store_id,
                total_amount=total,
                items=data.items,
                shipping_address=data.shipping_address,
                notes=data.notes,
            )
        )
        logger.info("Order %s placed with store %s, total %s", order.order_number, store.id, order.total_amount)
        return order
    raise OrderNumberExhausted("Could not allocate a unique order number")


def change_order_status(storage: Storage, order_id: str, status: str) -> Optional[OrderOut]:
    """Move an order along the lifecycle. Returns ``None`` for a missing order."""
    order = storage.get_order(order_id)
    if order is None:
        return None
    if order.status == status:
        return order
    if not can_transition(order.status, status):
        raise InvalidTransition(order.status, status)
    updated = storage.update_order(order_id, {"status": status})
    logger.info("Order %s moved from %s to %s", order.order_number, order.status, status)
    return updated
