"""
Lookup-table seeding and demo data.

``ensure_lookups`` is idempotent and safe to run on every release.
``generate_demo_data`` is for local development only.
"""
from __future__ import annotations

import logging
import random
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy.orm import Session

from app.crm.constants import CUSTOMER_STATUSES, ORDER_ITEM_CATEGORIES
from app.crm.modules.custom_sizes import store
from app.crm.modules.custom_sizes.utils import Triple
from app.crm.modules.customers.models import Customer, CustomerStatus
from app.crm.modules.orders.models import Order, OrderItem, OrderItemCategory

logger = logging.getLogger(__name__)

_FIRST_NAMES = ("Ada", "Grace", "Alan", "Linus", "Margaret", "Dennis", "Barbara", "Ken", "Frances", "Edsger")
_LAST_NAMES = ("Lovelace", "Hopper", "Turing", "Torvalds", "Hamilton", "Ritchie", "Liskov", "Thompson", "Allen", "Dijkstra")
_FABRICS = ("Wool", "Linen", "Cotton", "Tweed", "Silk", "Cashmere")


def ensure_lookups(s: Session) -> dict[str, int]:
    """Create missing customer_statuses / order_item_categories rows. Returns number added per table."""
    added = {"customer_statuses": 0, "order_item_categories": 0}
    for name in CUSTOMER_STATUSES:
        if not s.query(CustomerStatus).filter(CustomerStatus.name == name).one_or_none():
            s.add(CustomerStatus(name=name))
            added["customer_statuses"] += 1
    for name in ORDER_ITEM_CATEGORIES:
        if not s.query(OrderItemCategory).filter(OrderItemCategory.name == name).one_or_none():
            s.add(OrderItemCategory(name=name))
            added["order_item_categories"] += 1
    s.flush()
    return added


def _random_date(rng: random.Random, now: datetime, start_days: int, end_days: int) -> datetime:
    delta = rng.uniform(start_days, end_days)
    return (now + timedelta(days=delta)).replace(microsecond=0)


def _random_triple(rng: random.Random) -> Triple:
    # Half-inch steps, like a tape measure.
    return Triple(
        chest=rng.randint(60, 120) / 2,
        waist=rng.randint(50, 100) / 2,
        hips=rng.randint(60, 120) / 2,
    )


def generate_demo_data(
    s: Session,
    *,
    customers: int = 100,
    max_orders: int = 5,
    max_items: int = 3,
    seed: int | None = None,
) -> int:
    """
    Insert demo customers with orders, items and custom sizes.
    Order totals and customer aggregates (revenue, order_count, last_order_date) are
    computed from the generated rows. Returns the number of customers created.
    """
    ensure_lookups(s)
    rng = random.Random(seed)
    now = datetime.utcnow()
    statuses = {st.name: st.id for st in s.query(CustomerStatus).all()}
    category_ids = [c.id for c in s.query(OrderItemCategory).all()]
    existing = s.query(Customer).count()

    for n in range(customers):
        first, last = rng.choice(_FIRST_NAMES), rng.choice(_LAST_NAMES)
        created = _random_date(rng, now, -730, -30)
        c = Customer(
            name=f"{first} {last}",
            email=f"{first}.{last}.{existing + n + 1}@example.com".lower(),
            status_id=statuses[rng.choice(CUSTOMER_STATUSES)],
            created_at=created,
            modified_at=now,
        )
        s.add(c)
        s.flush()

        revenue = Decimal("0")
        last_order: datetime | None = None
        n_orders = rng.randint(0, max_orders)
        for _ in range(n_orders):
            order_date = _random_date(rng, now, -365, 0)
            o = Order(customer_id=c.id, order_date=order_date, created_at=order_date, modified_at=order_date)
            s.add(o)
            s.flush()
            total = Decimal("0")
            for _ in range(rng.randint(1, max_items)):
                size, _created = store.find_or_create(s, _random_triple(rng), order_date)
                price = Decimal(rng.randint(100, 1000))
                s.add(
                    OrderItem(
                        order_id=o.id,
                        item_name=f"{rng.choice(_FABRICS)} {rng.choice(ORDER_ITEM_CATEGORIES)}",
                        category_id=rng.choice(category_ids),
                        price=price,
                        custom_size_id=size.id,
                        created_at=order_date,
                        modified_at=order_date,
                    )
                )
                total += price
            o.total_amount = total
            revenue += total
            if last_order is None or order_date > last_order:
                last_order = order_date

        c.revenue = revenue
        c.order_count = n_orders
        c.last_order_date = last_order
        s.flush()

    logger.info("Generated %d demo customers", customers)
    return customers
