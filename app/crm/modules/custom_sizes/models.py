from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Float, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.crm.models import Base


class CustomSize(Base):
    """
    Body measurements (inches) for a made-to-measure item.

    Records are shared by value: two items with the same chest/waist/hips point at the
    same row. Rows are never edited in place; a change creates or reuses another row.
    """
    __tablename__ = "custom_sizes"
    __table_args__ = (
        UniqueConstraint("chest", "waist", "hips", name="uq_custom_sizes_triple"),
        CheckConstraint("chest > 0 AND waist > 0 AND hips > 0", name="ck_custom_sizes_positive"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    chest: Mapped[float] = mapped_column(Float, nullable=False)
    waist: Mapped[float] = mapped_column(Float, nullable=False)
    hips: Mapped[float] = mapped_column(Float, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    modified_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)

    @property
    def triple(self) -> tuple[float, float, float]:
        return (self.chest, self.waist, self.hips)
