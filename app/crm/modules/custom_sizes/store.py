"""
Measurement store: value-addressed CustomSize rows.

Callers own the transaction. Nothing here commits.
"""
from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import delete, exists, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.crm.modules.custom_sizes.models import CustomSize
from app.crm.modules.custom_sizes.utils import Triple
from app.crm.modules.orders.models import OrderItem

logger = logging.getLogger(__name__)


def find_by_triple(s: Session, chest: float, waist: float, hips: float) -> CustomSize | None:
    """Exact match on the stored values, no tolerance."""
    return (
        s.query(CustomSize)
        .filter(CustomSize.chest == chest, CustomSize.waist == waist, CustomSize.hips == hips)
        .order_by(CustomSize.id.asc())
        .first()
    )


def create(s: Session, triple: Triple, timestamp: datetime) -> CustomSize:
    size = CustomSize(
        chest=triple.chest,
        waist=triple.waist,
        hips=triple.hips,
        created_at=timestamp,
        modified_at=timestamp,
    )
    s.add(size)
    s.flush()
    return size


def find_or_create(s: Session, triple: Triple, timestamp: datetime) -> tuple[CustomSize, bool]:
    """
    Return (size, created). Reuses an existing row with the same triple.

    Another request may insert the same triple between our lookup and insert; the
    unique constraint catches that and we fall back to the row it created.
    """
    size = find_by_triple(s, *triple)
    if size:
        return size, False
    try:
        with s.begin_nested():  # SAVEPOINT so a lost race does not poison the transaction
            size = create(s, triple, timestamp)
        return size, True
    except IntegrityError:
        size = find_by_triple(s, *triple)
        if size:
            logger.info("custom_size insert lost race; reusing id=%s", size.id)
            return size, False
        raise


def delete_size(s: Session, size_id: int) -> bool:
    """Unconditional delete by id. Reference safety is the caller's job."""
    size = s.get(CustomSize, size_id)
    if size is None:
        return False
    s.delete(size)
    s.flush()
    return True


def count_referencing_items(s: Session, size_id: int) -> int:
    return int(
        s.execute(select(func.count(OrderItem.id)).where(OrderItem.custom_size_id == size_id)).scalar_one()
    )


def delete_if_unreferenced(s: Session, size_id: int) -> bool:
    """
    Delete the row only if no order item references it, as one statement.

    Returns True when a row was removed. A concurrent repoint onto the same row
    either makes the NOT EXISTS fail (row kept) or trips the RESTRICT foreign key
    (IntegrityError, propagated to the caller); the row is never deleted out from
    under a live reference.
    """
    referenced = exists().where(OrderItem.custom_size_id == size_id)
    stmt = (
        delete(CustomSize)
        .where(CustomSize.id == size_id, ~referenced)
        .execution_options(synchronize_session=False)
    )
    result = s.execute(stmt)
    removed = (result.rowcount or 0) > 0
    if removed:
        stale = s.identity_map.get(s.identity_key(CustomSize, size_id))
        if stale is not None:
            s.expunge(stale)
    return removed


def find_orphans(s: Session, *, limit: int | None = None) -> list[CustomSize]:
    """Rows no order item points at."""
    referenced = exists().where(OrderItem.custom_size_id == CustomSize.id)
    q = s.query(CustomSize).filter(~referenced).order_by(CustomSize.id.asc())
    if limit:
        q = q.limit(limit)
    return q.all()
