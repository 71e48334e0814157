"""
Store <-> wire field mapping.

Every JSON body the API returns is built from one of the field tables below, so
renaming a column or a wire key is a one-line change here.
"""
from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date, datetime
from decimal import Decimal
from typing import Any, NamedTuple


class Field(NamedTuple):
    attr: str  # attribute / column name on the model (snake_case)
    wire: str  # key in the JSON body (camelCase)


def _f(attr: str, wire: str | None = None) -> Field:
    return Field(attr, wire or attr)


CUSTOMER_FIELDS: tuple[Field, ...] = (
    _f("id"),
    _f("name"),
    _f("email"),
    _f("status_name", "status"),
    _f("revenue"),
    _f("order_count", "orderCount"),
    _f("last_order_date", "lastOrderDate"),
    _f("created_at", "createdAt"),
)

CUSTOM_SIZE_FIELDS: tuple[Field, ...] = (
    _f("id"),
    _f("chest"),
    _f("waist"),
    _f("hips"),
)

ORDER_ITEM_FIELDS: tuple[Field, ...] = (
    _f("id"),
    _f("id", "orderItemId"),
    _f("item_name", "itemName"),
    _f("category_name", "category"),
    _f("price"),
)

TRIPLE_FIELDS: tuple[Field, ...] = CUSTOM_SIZE_FIELDS[1:]

# Body of PATCH /orders/<order_id>/items/<item_id>
ORDER_ITEM_UPDATE_FIELDS: tuple[Field, ...] = (
    _f("order_id", "orderId"),
    _f("id", "itemId"),
    _f("item_name", "itemName"),
    _f("price"),
)

ORDER_FIELDS: tuple[Field, ...] = (
    _f("id"),
    _f("id", "orderId"),
    _f("order_date", "orderDate"),
    _f("total_amount", "totalAmount"),
)


def wire_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


def to_wire(obj: Any, fields: Iterable[Field]) -> dict[str, Any]:
    """Read each field's attr from ``obj`` (model or mapping) and emit it under its wire key."""
    get: Callable[[str], Any]
    if isinstance(obj, dict):
        get = obj.get
    else:
        get = lambda attr: getattr(obj, attr, None)  # noqa: E731
    return {f.wire: wire_value(get(f.attr)) for f in fields}


def from_wire(data: dict[str, Any], fields: Iterable[Field]) -> dict[str, Any]:
    """Inverse of to_wire for plain values: wire keys in, attr keys out. Unknown keys are dropped."""
    out: dict[str, Any] = {}
    for f in fields:
        if f.wire in data and f.attr not in out:
            out[f.attr] = data[f.wire]
    return out


def customer_to_wire(c: Any) -> dict[str, Any]:
    return to_wire(c, CUSTOMER_FIELDS)


def custom_size_to_wire(size: Any) -> dict[str, Any]:
    if size is None:
        return {"id": None, "chest": 0, "waist": 0, "hips": 0}
    return to_wire(size, CUSTOM_SIZE_FIELDS)


def order_item_to_wire(item: Any) -> dict[str, Any]:
    d = to_wire(item, ORDER_ITEM_FIELDS)
    d["customSize"] = custom_size_to_wire(item.custom_size)
    return d


def order_to_wire(order: Any) -> dict[str, Any]:
    d = to_wire(order, ORDER_FIELDS)
    d["items"] = [order_item_to_wire(i) for i in (order.items or [])]
    return d
