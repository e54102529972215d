"""create sales_plans table

Revision ID: 20261018_0002
Revises: 20261018_0001
Create Date: 2026-10-18 09:30:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "20261018_0002"
down_revision = "20261018_0001"
branch_labels = None
depends_on = None

_INDEXES: tuple[tuple[str, list[str]], ...] = (
    ("idx_sales_plans_product", ["product_id"]),
    ("idx_sales_plans_region", ["region_id"]),
    ("idx_sales_plans_bulan", ["bulan_tahun"]),
    ("idx_sales_plans_region_bulan", ["region_id", "bulan_tahun"]),
    ("idx_sales_plans_product_region", ["product_id", "region_id"]),
)


def upgrade() -> None:
    op.create_table(
        "sales_plans",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("product_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("region_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("bulan_tahun", sa.Date(), nullable=False,
                  comment="Month as DATE (always first day of month, e.g., 2026-01-01)"),
        sa.Column("target_jual", sa.Integer(), server_default=sa.text("0"), nullable=False,
                  comment="Monthly sales target set by management"),
        sa.Column("estimasi_jual", sa.Integer(), server_default=sa.text("0"), nullable=False,
                  comment="Estimated sales quantity"),
        sa.Column("realisasi_sales", sa.Integer(), server_default=sa.text("0"), nullable=False,
                  comment="Actual realized sales for the month"),
        sa.Column("stok_awal", sa.Integer(), server_default=sa.text("0"), nullable=False,
                  comment="Opening stock at beginning of month"),
        sa.Column("stok_akhir", sa.Integer(), server_default=sa.text("0"), nullable=False,
                  comment="Closing stock = stok_awal + order_qty - estimasi_jual"),
        sa.Column("order_qty", sa.Integer(), server_default=sa.text("0"), nullable=False,
                  comment="Order quantity to factory/supplier"),
        sa.Column("ito", sa.Numeric(precision=5, scale=2), server_default=sa.text("0"),
                  nullable=False, comment="Inventory turnover ratio"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.CheckConstraint("target_jual >= 0", name="chk_target_jual_positive"),
        sa.CheckConstraint("estimasi_jual >= 0", name="chk_estimasi_jual_positive"),
        sa.CheckConstraint("realisasi_sales >= 0", name="chk_realisasi_sales_positive"),
        sa.CheckConstraint("stok_awal >= 0", name="chk_stok_awal_positive"),
        sa.CheckConstraint("order_qty >= 0", name="chk_order_qty_positive"),
        sa.ForeignKeyConstraint(
            ["product_id"],
            ["master_products.id"],
            name="fk_sales_plans_product",
            ondelete="RESTRICT",
        ),
        sa.ForeignKeyConstraint(
            ["region_id"],
            ["master_regions.id"],
            name="fk_sales_plans_region",
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_sales_plans"),
        sa.UniqueConstraint(
            "product_id",
            "region_id",
            "bulan_tahun",
            name="uk_sales_plans_product_region_month",
        ),
    )
    for name, columns in _INDEXES:
        op.create_index(name, "sales_plans", columns, unique=False)


def downgrade() -> None:
    for name, _ in reversed(_INDEXES):
        op.drop_index(name, table_name="sales_plans")
    op.drop_table("sales_plans")
