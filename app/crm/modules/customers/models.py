from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.crm.models import Base


class CustomerStatus(Base):
    """Lookup table: active / churned / prospect."""
    __tablename__ = "customer_statuses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)


class Customer(Base):
    __tablename__ = "customers"
    __table_args__ = (
        Index("idx_customers_name", "name"),
        Index("idx_customers_status_id", "status_id"),
        Index("idx_customers_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    status_id: Mapped[int] = mapped_column(ForeignKey("customer_statuses.id", ondelete="RESTRICT"), nullable=False)

    # Denormalized order aggregates (maintained by the order import/seed path)
    revenue: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=2), nullable=False, default=Decimal("0"))
    order_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_order_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    modified_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)

    status: Mapped[CustomerStatus] = relationship("CustomerStatus", lazy="joined")
    orders: Mapped[list["Order"]] = relationship(
        "Order",
        back_populates="customer",
        order_by="Order.order_date.desc()",
        lazy="select",
    )

    @property
    def status_name(self) -> str | None:
        return self.status.name if self.status else None
