from __future__ import annotations

import math

from flask import Blueprint, jsonify, request

from app.crm.db import db_session
from app.crm.errors import InvalidArgument
from app.crm.modules.customers.service import create_customer, list_customers, update_customer_status
from app.crm.modules.customers.utils import parse_list_params
from app.crm.serializers import customer_to_wire

bp = Blueprint("customers", __name__)


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise InvalidArgument("Request body must be a JSON object.")
    return payload


@bp.get("/customers")
def customers_list():
    params = parse_list_params(request.args)
    s = db_session()
    customers, total = list_customers(s, params)
    return jsonify({
        "data": [customer_to_wire(c) for c in customers],
        "pagination": {
            "total_items": total,
            "total_pages": math.ceil(total / params.limit) if total else 0,
            "current_page": params.page,
            "items_per_page": params.limit,
        },
    })


@bp.post("/customers")
def customers_create():
    payload = _json_body()
    s = db_session()
    c = create_customer(s, payload)
    s.commit()
    return jsonify({"success": True, "data": customer_to_wire(c)}), 201


@bp.patch("/customers/<int:customer_id>")
def customers_update_status(customer_id: int):
    payload = _json_body()
    s = db_session()
    c, changed = update_customer_status(s, customer_id, payload.get("status"))
    if changed:
        s.commit()
    return jsonify({"success": True, "changed": changed, "data": customer_to_wire(c)})
