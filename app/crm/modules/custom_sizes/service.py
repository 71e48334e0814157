"""
CUSTOM-SIZE RECONCILIATION
==========================

Applies a measurement change to one order item.

1. Load the item scoped to its order (row-locked where supported).
2. Find a CustomSize with the exact same chest/waist/hips, or create one.
3. Repoint the item at it.
4. Delete the previous CustomSize if nothing references it any more.

INVARIANTS:
- Every order item references an existing CustomSize (FK ON DELETE RESTRICT).
- Step 4 is a single conditional DELETE in the same transaction as step 3. If it
  cannot run safely the old row is left behind; an orphan is tolerated, a dangling
  reference is not.

The caller commits. Orphans left behind can be cleared with scripts/sweep_orphan_sizes.py.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.crm.audit import record_event
from app.crm.errors import NotFound
from app.crm.modules.custom_sizes import store
from app.crm.modules.custom_sizes.utils import Triple, parse_triple
from app.crm.modules.orders.models import OrderItem
from app.crm.modules.orders.service import get_order_item, update_measurement_ref

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconcileResult:
    custom_size_id: int
    triple: Triple
    item: OrderItem
    created: bool
    previous_size_id: int | None
    previous_deleted: bool


def _cleanup_previous(s: Session, old_id: int, *, item_id: int) -> bool:
    try:
        with s.begin_nested():
            removed = store.delete_if_unreferenced(s, old_id)
    except SQLAlchemyError as e:
        logger.warning("custom_size cleanup skipped: id=%s item=%s err=%s", old_id, item_id, e)
        return False
    if removed:
        logger.info("Cleaned up orphaned custom_size id=%s (item=%s)", old_id, item_id)
        record_event(
            s,
            action="custom_size.orphan_delete",
            entity_type="CustomSize",
            entity_id=str(old_id),
            metadata={"item_id": item_id},
        )
    else:
        logger.info("custom_size id=%s still referenced; kept", old_id)
    return removed


def reconcile(
    s: Session,
    *,
    order_id: int,
    item_id: int,
    custom_size: Any,
    timestamp: datetime | None = None,
) -> ReconcileResult:
    triple = parse_triple(custom_size)
    ts = timestamp or datetime.utcnow()

    item = get_order_item(s, item_id, order_id, for_update=True)
    if item is None:
        logger.info("Order item not found: order=%s item=%s", order_id, item_id)
        raise NotFound("Order item not found.")
    old_id = item.custom_size_id

    size, created = store.find_or_create(s, triple, ts)
    if created:
        logger.info("Created custom_size id=%s %s", size.id, tuple(triple))
    else:
        logger.info("Reusing custom_size id=%s %s", size.id, tuple(triple))

    if old_id == size.id:
        # Same triple resubmitted: nothing to repoint, nothing to clean.
        return ReconcileResult(
            custom_size_id=size.id,
            triple=Triple(*size.triple),
            item=item,
            created=False,
            previous_size_id=old_id,
            previous_deleted=False,
        )

    item = update_measurement_ref(s, item.id, size.id, ts)
    if item is None:
        raise NotFound("Order item not found.")

    previous_deleted = False
    if old_id is not None:
        previous_deleted = _cleanup_previous(s, old_id, item_id=item.id)

    record_event(
        s,
        action="order_item.custom_size_update",
        entity_type="OrderItem",
        entity_id=str(item.id),
        metadata={
            "order_id": order_id,
            "before_custom_size_id": old_id,
            "after_custom_size_id": size.id,
            "created": created,
            "previous_deleted": previous_deleted,
        },
    )
    return ReconcileResult(
        custom_size_id=size.id,
        triple=Triple(*size.triple),
        item=item,
        created=created,
        previous_size_id=old_id,
        previous_deleted=previous_deleted,
    )
