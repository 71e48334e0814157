"""initial crm schema: customers, orders, order items, custom sizes

Revision ID: a0c1d2e3f4a5
Revises:
Create Date: 2026-10-18

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = "a0c1d2e3f4a5"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=False), nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column("modified_at", sa.DateTime(timezone=False), nullable=False, server_default=sa.func.current_timestamp()),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    insp = inspect(bind)
    existing_tables = set(insp.get_table_names())

    if "customer_statuses" not in existing_tables:
        op.create_table(
            "customer_statuses",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("name", sa.Text(), nullable=False),
            sa.UniqueConstraint("name", name="uq_customer_statuses_name"),
        )

    if "order_item_categories" not in existing_tables:
        op.create_table(
            "order_item_categories",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("name", sa.Text(), nullable=False),
            sa.UniqueConstraint("name", name="uq_order_item_categories_name"),
        )

    if "customers" not in existing_tables:
        op.create_table(
            "customers",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("name", sa.Text(), nullable=False),
            sa.Column("email", sa.Text(), nullable=False),
            sa.Column("status_id", sa.Integer(), nullable=False),
            sa.Column("revenue", sa.Numeric(precision=12, scale=2), nullable=False, server_default="0"),
            sa.Column("order_count", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("last_order_date", sa.DateTime(timezone=False), nullable=True),
            *_timestamps(),
            sa.ForeignKeyConstraint(["status_id"], ["customer_statuses.id"], ondelete="RESTRICT"),
            sa.UniqueConstraint("email", name="uq_customers_email"),
        )
        op.create_index("idx_customers_name", "customers", ["name"])
        op.create_index("idx_customers_status_id", "customers", ["status_id"])
        op.create_index("idx_customers_created_at", "customers", ["created_at"])

    if "orders" not in existing_tables:
        op.create_table(
            "orders",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("customer_id", sa.Integer(), nullable=False),
            sa.Column("order_date", sa.DateTime(timezone=False), nullable=False),
            sa.Column("total_amount", sa.Numeric(precision=12, scale=2), nullable=False, server_default="0"),
            *_timestamps(),
            sa.ForeignKeyConstraint(["customer_id"], ["customers.id"], ondelete="CASCADE"),
        )
        op.create_index("idx_orders_customer_id", "orders", ["customer_id"])
        op.create_index("idx_orders_order_date", "orders", ["order_date"])

    if "custom_sizes" not in existing_tables:
        op.create_table(
            "custom_sizes",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("chest", sa.Float(), nullable=False),
            sa.Column("waist", sa.Float(), nullable=False),
            sa.Column("hips", sa.Float(), nullable=False),
            *_timestamps(),
            sa.UniqueConstraint("chest", "waist", "hips", name="uq_custom_sizes_triple"),
            sa.CheckConstraint("chest > 0 AND waist > 0 AND hips > 0", name="ck_custom_sizes_positive"),
        )

    if "order_items" not in existing_tables:
        op.create_table(
            "order_items",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("order_id", sa.Integer(), nullable=False),
            sa.Column("item_name", sa.Text(), nullable=False),
            sa.Column("category_id", sa.Integer(), nullable=True),
            sa.Column("price", sa.Numeric(precision=10, scale=2), nullable=False),
            sa.Column("custom_size_id", sa.Integer(), nullable=False),
            *_timestamps(),
            sa.ForeignKeyConstraint(["order_id"], ["orders.id"], ondelete="CASCADE"),
            sa.ForeignKeyConstraint(["category_id"], ["order_item_categories.id"], ondelete="SET NULL"),
            sa.ForeignKeyConstraint(["custom_size_id"], ["custom_sizes.id"], ondelete="RESTRICT"),
        )
        op.create_index("idx_order_items_order_id", "order_items", ["order_id"])
        op.create_index("idx_order_items_custom_size_id", "order_items", ["custom_size_id"])

    if "audit_events" not in existing_tables:
        op.create_table(
            "audit_events",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=False), nullable=False, server_default=sa.func.current_timestamp()),
            sa.Column("request_id", sa.String(length=64), nullable=True),
            sa.Column("action", sa.String(length=128), nullable=False),
            sa.Column("entity_type", sa.String(length=128), nullable=True),
            sa.Column("entity_id", sa.String(length=128), nullable=True),
            sa.Column("metadata_json", sa.Text(), nullable=True),
        )
        op.create_index("idx_audit_events_entity", "audit_events", ["entity_type", "entity_id"])


def downgrade() -> None:
    op.drop_index("idx_audit_events_entity", table_name="audit_events")
    op.drop_table("audit_events")

    op.drop_index("idx_order_items_custom_size_id", table_name="order_items")
    op.drop_index("idx_order_items_order_id", table_name="order_items")
    op.drop_table("order_items")

    op.drop_table("custom_sizes")

    op.drop_index("idx_orders_order_date", table_name="orders")
    op.drop_index("idx_orders_customer_id", table_name="orders")
    op.drop_table("orders")

    op.drop_index("idx_customers_created_at", table_name="customers")
    op.drop_index("idx_customers_status_id", table_name="customers")
    op.drop_index("idx_customers_name", table_name="customers")
    op.drop_table("customers")

    op.drop_table("order_item_categories")
    op.drop_table("customer_statuses")
