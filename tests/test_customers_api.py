"""Tests for the customer list, create and status endpoints."""
from datetime import datetime
from decimal import Decimal


def test_list_defaults_and_pagination(client, factory):
    for i in range(12):
        factory.customer(name=f"Customer {i:02d}", created_at=datetime(2026, 1, 1 + i))

    r = client.get("/api/customers")
    assert r.status_code == 200
    body = r.get_json()
    assert len(body["data"]) == 10
    assert body["pagination"] == {"total_items": 12, "total_pages": 2, "current_page": 1, "items_per_page": 10}
    # newest first by default
    assert body["data"][0]["name"] == "Customer 11"

    r = client.get("/api/customers?page=2&limit=10")
    assert [c["name"] for c in r.get_json()["data"]] == ["Customer 01", "Customer 00"]


def test_list_wire_shape(client, factory):
    factory.customer(
        name="Ada Lovelace",
        email="ada@example.com",
        status="churned",
        revenue=Decimal("1234.50"),
        order_count=3,
        last_order_date=datetime(2026, 4, 2, 9, 30),
        created_at=datetime(2025, 1, 1),
    )
    c = client.get("/api/customers").get_json()["data"][0]
    assert set(c) == {"id", "name", "email", "status", "revenue", "orderCount", "lastOrderDate", "createdAt"}
    assert c["status"] == "churned"
    assert c["revenue"] == 1234.5
    assert c["orderCount"] == 3
    assert c["lastOrderDate"] == "2026-04-02T09:30:00"


def test_list_sort_and_search(client, factory):
    factory.customer(name="Zoe Zed", email="zoe@shop.test", revenue=Decimal("10"))
    factory.customer(name="Al Able", email="al@example.com", revenue=Decimal("300"))
    factory.customer(name="Mo Mid", email="mo_50%@example.com", revenue=Decimal("20"))

    r = client.get("/api/customers?sortBy=name&order=asc")
    assert [c["name"] for c in r.get_json()["data"]] == ["Al Able", "Mo Mid", "Zoe Zed"]

    r = client.get("/api/customers?sortBy=revenue&order=desc")
    assert [c["name"] for c in r.get_json()["data"]] == ["Al Able", "Mo Mid", "Zoe Zed"]

    r = client.get("/api/customers", query_string={"search": "  EXAMPLE.com "})
    assert sorted(c["name"] for c in r.get_json()["data"]) == ["Al Able", "Mo Mid"]

    r = client.get("/api/customers?search=zoe")
    assert [c["name"] for c in r.get_json()["data"]] == ["Zoe Zed"]

    # % is matched literally, not as a wildcard
    r = client.get("/api/customers", query_string={"search": "50%"})
    assert [c["name"] for c in r.get_json()["data"]] == ["Mo Mid"]
    r = client.get("/api/customers", query_string={"search": "_"})
    assert [c["name"] for c in r.get_json()["data"]] == ["Mo Mid"]


def test_list_rejects_bad_params(client):
    assert client.get("/api/customers?sortBy=password").status_code == 400
    assert client.get("/api/customers?order=sideways").status_code == 400
    assert client.get("/api/customers?page=abc").status_code == 400
    assert client.get("/api/customers?search=" + "x" * 101).status_code == 400


def test_list_rejects_page_past_offset_range(client, factory):
    factory.customer()
    r = client.get("/api/customers?page=" + "9" * 30)
    assert r.status_code == 400
    assert r.get_json()["fields"] == {"page": "is out of range"}


def test_list_clamps_limit(client, factory):
    factory.customer()
    body = client.get("/api/customers?limit=500").get_json()
    assert body["pagination"]["items_per_page"] == 100
    body = client.get("/api/customers?limit=0&page=-3").get_json()
    assert body["pagination"]["items_per_page"] == 1
    assert body["pagination"]["current_page"] == 1


def test_create_customer(client, factory):
    r = client.post("/api/customers", json={"name": " Grace Hopper ", "email": "Grace@Navy.MIL"})
    assert r.status_code == 201
    data = r.get_json()["data"]
    assert data["name"] == "Grace Hopper"
    assert data["email"] == "grace@navy.mil"
    assert data["status"] == "prospect"
    assert data["orderCount"] == 0
    assert "customer.create" in factory.audit_actions()


def test_create_customer_validation(client):
    r = client.post("/api/customers", json={"name": "", "email": "not-an-email"})
    assert r.status_code == 400
    assert set(r.get_json()["fields"]) == {"name", "email"}

    r = client.post("/api/customers", json={"name": "X", "email": "x@example.com", "status": "vip"})
    assert r.status_code == 400

    r = client.post("/api/customers", json=["not", "an", "object"])
    assert r.status_code == 400


def test_create_customer_duplicate_email_conflicts(client, factory):
    factory.customer(email="dup@example.com")
    r = client.post("/api/customers", json={"name": "Other", "email": "DUP@example.com"})
    assert r.status_code == 409


def test_patch_status(client, factory):
    cid = factory.customer(status="prospect")

    r = client.patch(f"/api/customers/{cid}", json={"status": "active"})
    assert r.status_code == 200
    body = r.get_json()
    assert body["changed"] is True
    assert body["data"]["status"] == "active"
    assert body["data"]["id"] == cid

    listed = client.get("/api/customers").get_json()["data"][0]
    assert listed["status"] == "active"
    assert factory.audit_actions().count("customer.status_update") == 1


def test_patch_same_status_is_noop(client, factory):
    cid = factory.customer(status="churned")
    r = client.patch(f"/api/customers/{cid}", json={"status": "churned"})
    assert r.status_code == 200
    assert r.get_json()["changed"] is False
    assert r.get_json()["data"]["status"] == "churned"
    assert "customer.status_update" not in factory.audit_actions()


def test_patch_status_errors(client, factory):
    cid = factory.customer()
    assert client.patch("/api/customers/999", json={"status": "active"}).status_code == 404
    assert client.patch(f"/api/customers/{cid}", json={"status": "gold"}).status_code == 400
    assert client.patch(f"/api/customers/{cid}", json={}).status_code == 400
