"""The store <-> wire field tables."""
from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

from app.crm.serializers import (
    CUSTOMER_FIELDS,
    ORDER_ITEM_FIELDS,
    custom_size_to_wire,
    from_wire,
    order_to_wire,
    to_wire,
)


def test_customer_field_table():
    assert [(f.attr, f.wire) for f in CUSTOMER_FIELDS] == [
        ("id", "id"),
        ("name", "name"),
        ("email", "email"),
        ("status_name", "status"),
        ("revenue", "revenue"),
        ("order_count", "orderCount"),
        ("last_order_date", "lastOrderDate"),
        ("created_at", "createdAt"),
    ]


def test_to_wire_converts_values():
    row = {
        "id": 7,
        "name": "Ada",
        "email": "ada@example.com",
        "status_name": "active",
        "revenue": Decimal("10.50"),
        "order_count": 2,
        "last_order_date": None,
        "created_at": datetime(2026, 1, 2, 3, 4, 5),
    }
    assert to_wire(row, CUSTOMER_FIELDS) == {
        "id": 7,
        "name": "Ada",
        "email": "ada@example.com",
        "status": "active",
        "revenue": 10.5,
        "orderCount": 2,
        "lastOrderDate": None,
        "createdAt": "2026-01-02T03:04:05",
    }


def test_from_wire_maps_back_and_drops_unknown():
    assert from_wire({"orderCount": 3, "lastOrderDate": None, "bogus": 1}, CUSTOMER_FIELDS) == {
        "order_count": 3,
        "last_order_date": None,
    }
    # orderItemId and id both map to the id column; the first one wins
    assert from_wire({"id": 1, "orderItemId": 2, "itemName": "Coat"}, ORDER_ITEM_FIELDS) == {"id": 1, "item_name": "Coat"}


def test_missing_size_renders_zeroes():
    assert custom_size_to_wire(None) == {"id": None, "chest": 0, "waist": 0, "hips": 0}


def test_order_nests_items():
    size = SimpleNamespace(id=3, chest=38.0, waist=32.0, hips=40.0)
    item = SimpleNamespace(id=9, item_name="Coat", category_name="", price=Decimal("99.99"), custom_size=size)
    order = SimpleNamespace(id=4, order_date=datetime(2026, 2, 1), total_amount=Decimal("99.99"), items=[item])
    assert order_to_wire(order) == {
        "id": 4,
        "orderId": 4,
        "orderDate": "2026-02-01T00:00:00",
        "totalAmount": 99.99,
        "items": [
            {
                "id": 9,
                "orderItemId": 9,
                "itemName": "Coat",
                "category": "",
                "price": 99.99,
                "customSize": {"id": 3, "chest": 38.0, "waist": 32.0, "hips": 40.0},
            }
        ],
    }
