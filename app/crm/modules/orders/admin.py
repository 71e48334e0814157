from __future__ import annotations

from datetime import datetime

from flask import Blueprint, jsonify, request

from app.crm.db import db_session
from app.crm.errors import InvalidArgument
from app.crm.modules.custom_sizes.service import reconcile
from app.crm.modules.custom_sizes.utils import parse_timestamp
from app.crm.modules.orders.service import list_customer_orders
from app.crm.serializers import ORDER_ITEM_UPDATE_FIELDS, TRIPLE_FIELDS, order_to_wire, to_wire

bp = Blueprint("orders", __name__)


@bp.get("/customers/<int:customer_id>/orders")
def customer_orders(customer_id: int):
    s = db_session()
    orders = list_customer_orders(s, customer_id)
    return jsonify({"data": [order_to_wire(o) for o in orders]})


@bp.patch("/orders/<int:order_id>/items/<int:item_id>")
def order_item_custom_size(order_id: int, item_id: int):
    """Change an item's measurements (find-or-create size, repoint, clean up the old one)."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise InvalidArgument("Request body must be a JSON object.")

    updated_at_raw = payload.get("updatedAt")
    ts = parse_timestamp(updated_at_raw) or datetime.utcnow()

    s = db_session()
    result = reconcile(
        s,
        order_id=order_id,
        item_id=item_id,
        custom_size=payload.get("customSize"),
        timestamp=ts,
    )
    s.commit()

    data = to_wire(result.item, ORDER_ITEM_UPDATE_FIELDS)
    data["customSize"] = to_wire(result.triple._asdict(), TRIPLE_FIELDS)
    if isinstance(updated_at_raw, str) and updated_at_raw.strip():
        data["updatedAt"] = updated_at_raw
    else:
        data["updatedAt"] = ts.isoformat() + "Z"
    return jsonify({"success": True, "data": data})
