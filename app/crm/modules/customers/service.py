from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.crm.audit import record_event
from app.crm.constants import CUSTOMER_STATUSES, DEFAULT_CUSTOMER_STATUS
from app.crm.errors import Conflict, InvalidArgument, NotFound, StoreFailure
from app.crm.modules.customers.models import Customer, CustomerStatus
from app.crm.modules.customers.utils import ListParams, escape_like, is_valid_email, normalize_email

logger = logging.getLogger(__name__)


def get_customer_by_id(s: Session, customer_id: int) -> Customer | None:
    return s.query(Customer).filter(Customer.id == customer_id).one_or_none()


def get_customer_by_email(s: Session, email: str) -> Customer | None:
    return s.query(Customer).filter(Customer.email == normalize_email(email)).one_or_none()


def get_status(s: Session, name: str) -> CustomerStatus | None:
    return s.query(CustomerStatus).filter(CustomerStatus.name == name).one_or_none()


def _require_status(s: Session, name: str) -> CustomerStatus:
    if name not in CUSTOMER_STATUSES:
        raise InvalidArgument(
            f"Invalid status. Must be one of: {', '.join(CUSTOMER_STATUSES)}",
            fields={"status": "unknown status"},
        )
    st = get_status(s, name)
    if st is None:
        # Lookup rows are seeded by scripts/init_db.py.
        logger.error("customer_statuses row missing: %s (run scripts/init_db.py)", name)
        raise StoreFailure()
    return st


def list_customers(s: Session, params: ListParams) -> tuple[list[Customer], int]:
    query = s.query(Customer)
    if params.search:
        like = f"%{escape_like(params.search)}%"
        query = query.filter(
            or_(
                Customer.name.ilike(like, escape="\\"),
                Customer.email.ilike(like, escape="\\"),
            )
        )

    total = query.count()

    col = getattr(Customer, params.sort_by)
    primary = col.asc() if params.order == "asc" else col.desc()
    tiebreak = Customer.id.asc() if params.order == "asc" else Customer.id.desc()
    customers = (
        query.order_by(primary.nullslast(), tiebreak)
        .offset(params.offset)
        .limit(params.limit)
        .all()
    )
    return customers, total


def validate_customer_payload(payload: dict[str, Any]) -> dict[str, str]:
    errs: dict[str, str] = {}
    name = payload.get("name")
    if not isinstance(name, str) or not name.strip():
        errs["name"] = "Name is required."
    email = payload.get("email")
    if not isinstance(email, str) or not email.strip():
        errs["email"] = "Email is required."
    elif not is_valid_email(email):
        errs["email"] = "Email is not a valid address."
    status = payload.get("status")
    if status is not None and status not in CUSTOMER_STATUSES:
        errs["status"] = f"Must be one of: {', '.join(CUSTOMER_STATUSES)}"
    return errs


def create_customer(s: Session, payload: dict[str, Any]) -> Customer:
    errs = validate_customer_payload(payload)
    if errs:
        raise InvalidArgument("Invalid customer data.", fields=errs)

    email = normalize_email(payload["email"])
    if get_customer_by_email(s, email):
        raise Conflict("A customer with this email already exists.")

    st = _require_status(s, payload.get("status") or DEFAULT_CUSTOMER_STATUS)
    now = datetime.utcnow()
    try:
        with s.begin_nested():
            c = Customer(
                name=payload["name"].strip(),
                email=email,
                status_id=st.id,
                created_at=now,
                modified_at=now,
            )
            s.add(c)
            s.flush()
    except IntegrityError as e:
        # Lost a race with a concurrent insert of the same email.
        raise Conflict("A customer with this email already exists.") from e

    record_event(
        s,
        action="customer.create",
        entity_type="Customer",
        entity_id=str(c.id),
        metadata={"email": c.email, "status": st.name},
    )
    logger.info("Created customer id=%s", c.id)
    return c


def update_customer_status(s: Session, customer_id: int, status: Any) -> tuple[Customer, bool]:
    """
    Set a customer's status. Returns (customer, changed).
    Re-submitting the current status is a successful no-op.
    """
    if not isinstance(status, str) or not status.strip():
        raise InvalidArgument("Status is required.", fields={"status": "is required"})
    status = status.strip().lower()
    if status not in CUSTOMER_STATUSES:
        raise InvalidArgument(
            f"Invalid status. Must be one of: {', '.join(CUSTOMER_STATUSES)}",
            fields={"status": "unknown status"},
        )
    c = get_customer_by_id(s, customer_id)
    if c is None:
        raise NotFound("Customer not found.")
    st = _require_status(s, status)
    if c.status_id == st.id:
        return c, False

    before = c.status_name
    c.status_id = st.id
    c.status = st
    c.modified_at = datetime.utcnow()
    record_event(
        s,
        action="customer.status_update",
        entity_type="Customer",
        entity_id=str(c.id),
        metadata={"before": before, "after": st.name},
    )
    return c, True
