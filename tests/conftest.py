from datetime import datetime
from decimal import Decimal

import pytest

from app.crm import create_app
from app.crm.db import session_scope
from app.crm.models import AuditEvent, Base
from app.crm.modules.custom_sizes.models import CustomSize
from app.crm.modules.customers.models import Customer, CustomerStatus
from app.crm.modules.orders.models import Order, OrderItem, OrderItemCategory
from app.crm.seed import ensure_lookups


@pytest.fixture()
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    app = create_app()
    engine = app.extensions["sqlalchemy_engine"]
    Base.metadata.create_all(bind=engine)

    with session_scope(app) as s:
        ensure_lookups(s)

    return app


@pytest.fixture()
def client(app):
    return app.test_client()


class Factory:
    """Inserts rows in their own committed sessions and hands back ids."""

    def __init__(self, app):
        self.app = app
        self._n = 0

    def customer(self, name: str = "Ada Lovelace", email: str | None = None, status: str = "active", **kw) -> int:
        self._n += 1
        with session_scope(self.app) as s:
            st = s.query(CustomerStatus).filter(CustomerStatus.name == status).one()
            c = Customer(
                name=name,
                email=email or f"customer{self._n}@example.com",
                status_id=st.id,
                **kw,
            )
            s.add(c)
            s.flush()
            return c.id

    def order(self, customer_id: int, order_date: datetime | None = None) -> int:
        with session_scope(self.app) as s:
            o = Order(customer_id=customer_id, order_date=order_date or datetime(2026, 5, 1), total_amount=Decimal("500"))
            s.add(o)
            s.flush()
            return o.id

    def size(self, chest: float, waist: float, hips: float) -> int:
        with session_scope(self.app) as s:
            size = CustomSize(chest=chest, waist=waist, hips=hips)
            s.add(size)
            s.flush()
            return size.id

    def item(self, order_id: int, size_id: int, item_name: str = "Wool Suit", price: str = "500.00", category: str = "Suit") -> int:
        with session_scope(self.app) as s:
            cat = s.query(OrderItemCategory).filter(OrderItemCategory.name == category).one()
            it = OrderItem(
                order_id=order_id,
                item_name=item_name,
                category_id=cat.id,
                price=Decimal(price),
                custom_size_id=size_id,
            )
            s.add(it)
            s.flush()
            return it.id

    def item_with_size(self, triple: tuple[float, float, float]) -> tuple[int, int, int]:
        """New customer + order + item bound to a fresh size. Returns (order_id, item_id, size_id)."""
        cid = self.customer()
        oid = self.order(cid)
        sid = self.size(*triple)
        iid = self.item(oid, sid)
        return oid, iid, sid

    def item_size_id(self, item_id: int) -> int:
        with session_scope(self.app) as s:
            return s.get(OrderItem, item_id).custom_size_id

    def size_count(self) -> int:
        with session_scope(self.app) as s:
            return s.query(CustomSize).count()

    def size_ids_for(self, chest: float, waist: float, hips: float) -> list[int]:
        with session_scope(self.app) as s:
            rows = (
                s.query(CustomSize.id)
                .filter(CustomSize.chest == chest, CustomSize.waist == waist, CustomSize.hips == hips)
                .all()
            )
            return [r[0] for r in rows]

    def audit_actions(self) -> list[str]:
        with session_scope(self.app) as s:
            return [e.action for e in s.query(AuditEvent).order_by(AuditEvent.id.asc()).all()]


@pytest.fixture()
def factory(app):
    return Factory(app)
