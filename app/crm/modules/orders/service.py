from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from app.crm.errors import NotFound
from app.crm.modules.customers.models import Customer
from app.crm.modules.orders.models import Order, OrderItem


def get_order_item(s: Session, item_id: int, order_id: int, *, for_update: bool = False) -> OrderItem | None:
    """
    Scoped lookup: the item must belong to ``order_id``.
    An item that exists under another order is reported as missing.
    """
    q = s.query(OrderItem).filter(OrderItem.id == item_id, OrderItem.order_id == order_id)
    if for_update:
        # Row lock on backends that support it (no-op on SQLite).
        q = q.with_for_update()
    return q.one_or_none()


def update_measurement_ref(s: Session, item_id: int, custom_size_id: int, timestamp: datetime) -> OrderItem | None:
    item = s.get(OrderItem, item_id)
    if item is None:
        return None
    item.custom_size_id = custom_size_id
    item.modified_at = timestamp
    s.flush()
    # Relationship may still hold the previous size object.
    s.expire(item, ["custom_size"])
    return item


def list_customer_orders(s: Session, customer_id: int) -> list[Order]:
    """Orders for one customer, newest first, with items/category/size loaded."""
    customer = s.get(Customer, customer_id)
    if customer is None:
        raise NotFound("Customer not found.")
    return (
        s.query(Order)
        .filter(Order.customer_id == customer_id)
        .order_by(Order.order_date.desc(), Order.id.desc())
        .all()
    )
