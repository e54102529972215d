"""
db/models/sales_plan.py

Monthly planning fact: one row per product per region per month.
"""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from db.models.product import MasterProduct
    from db.models.region import MasterRegion

NATURAL_KEY_CONSTRAINT = "uk_sales_plans_product_region_month"
NATURAL_KEY_COLUMNS: tuple[str, ...] = ("product_id", "region_id", "bulan_tahun")


class SalesPlan(Base, TimestampMixin):
    """
    Sales estimate, stock and order figures for one product in one region
    for one month.

    ``month`` (column ``bulan_tahun``) is always the first day of the month.
    The unique constraint on ``(product_id, region_id, bulan_tahun)`` drives
    upsert semantics: saving the same cell twice updates the existing row.

    ``closing_stock`` is maintained by the planning editor as
    ``opening_stock + order_qty - estimated_sale_qty`` and may go negative
    to signal a shortfall; it has no check constraint.
    """

    __tablename__ = "sales_plans"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("master_products.id", ondelete="RESTRICT", name="fk_sales_plans_product"),
        nullable=False,
    )
    region_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("master_regions.id", ondelete="RESTRICT", name="fk_sales_plans_region"),
        nullable=False,
    )
    month: Mapped[date] = mapped_column(
        "bulan_tahun",
        Date,
        nullable=False,
        comment="Month as DATE (always first day of month, e.g., 2026-01-01)",
    )

    target_qty: Mapped[int] = mapped_column(
        "target_jual",
        Integer,
        nullable=False,
        default=0,
        comment="Monthly sales target set by management",
    )
    estimated_sale_qty: Mapped[int] = mapped_column(
        "estimasi_jual",
        Integer,
        nullable=False,
        default=0,
        comment="Estimated sales quantity",
    )
    realized_sale_qty: Mapped[int] = mapped_column(
        "realisasi_sales",
        Integer,
        nullable=False,
        default=0,
        comment="Actual realized sales for the month",
    )
    opening_stock: Mapped[int] = mapped_column(
        "stok_awal",
        Integer,
        nullable=False,
        default=0,
        comment="Opening stock at beginning of month",
    )
    closing_stock: Mapped[int] = mapped_column(
        "stok_akhir",
        Integer,
        nullable=False,
        default=0,
        comment="Closing stock = stok_awal + order_qty - estimasi_jual",
    )
    order_qty: Mapped[int] = mapped_column(
        "order_qty",
        Integer,
        nullable=False,
        default=0,
        comment="Order quantity to factory/supplier",
    )
    turnover_ratio: Mapped[Decimal] = mapped_column(
        "ito",
        Numeric(5, 2),
        nullable=False,
        default=Decimal("0.00"),
        comment="Inventory turnover ratio",
    )

    # ── Relationships ──────────────────────────────────────────────────────────

    product: Mapped["MasterProduct"] = relationship("MasterProduct", back_populates="sales_plans")
    region: Mapped["MasterRegion"] = relationship("MasterRegion", back_populates="sales_plans")

    # ── Constraints / Indexes ──────────────────────────────────────────────────

    __table_args__ = (
        UniqueConstraint(*NATURAL_KEY_COLUMNS, name=NATURAL_KEY_CONSTRAINT),
        CheckConstraint("target_jual >= 0", name="chk_target_jual_positive"),
        CheckConstraint("estimasi_jual >= 0", name="chk_estimasi_jual_positive"),
        CheckConstraint("realisasi_sales >= 0", name="chk_realisasi_sales_positive"),
        CheckConstraint("stok_awal >= 0", name="chk_stok_awal_positive"),
        CheckConstraint("order_qty >= 0", name="chk_order_qty_positive"),
        Index("idx_sales_plans_product", "product_id"),
        Index("idx_sales_plans_region", "region_id"),
        Index("idx_sales_plans_bulan", "bulan_tahun"),
        Index("idx_sales_plans_region_bulan", "region_id", "bulan_tahun"),
        Index("idx_sales_plans_product_region", "product_id", "region_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<SalesPlan id={self.id} product_id={self.product_id} "
            f"region_id={self.region_id} month={self.month}>"
        )
