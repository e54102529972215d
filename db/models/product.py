"""
db/models/product.py

Master product model: one battery SKU in the distributor's catalog.
Reference data: maintained by an admin workflow, read-only to planning.
"""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Index, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from db.models.sales_plan import SalesPlan


class MasterProduct(Base, TimestampMixin):
    """
    One product (battery type) offered by the distributor.

    ``kategori`` partitions the catalog into two product lines:
    AMB (car batteries) and MCB (motorcycle batteries).
    ``std_pallet`` and ``isi_dus`` are packing constants used by planners
    when converting quantities to pallets and boxes.
    """

    __tablename__ = "master_products"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    code: Mapped[str] = mapped_column(
        "kode_barang",
        String(50),
        nullable=False,
        comment="Unique product code (e.g., YUAMF.001)",
    )

    name: Mapped[str | None] = mapped_column(
        "nama_produk",
        String(255),
        nullable=True,
    )

    type_spec: Mapped[str] = mapped_column(
        "tipe",
        String(50),
        nullable=False,
        comment="Product type specification (e.g., NS-40-ZL)",
    )

    category: Mapped[str] = mapped_column(
        "kategori",
        String(10),
        nullable=False,
        comment="AMB (car battery) or MCB (motorcycle battery)",
    )

    units_per_pallet: Mapped[int] = mapped_column(
        "std_pallet",
        Integer,
        nullable=False,
        default=0,
        comment="Standard quantity per pallet",
    )

    units_per_box: Mapped[int] = mapped_column(
        "isi_dus",
        Integer,
        nullable=False,
        default=0,
        comment="Number of units per box/carton",
    )

    # ── Relationships ──────────────────────────────────────────────────────────

    sales_plans: Mapped[list["SalesPlan"]] = relationship(
        "SalesPlan",
        back_populates="product",
        passive_deletes=True,
    )

    # ── Constraints / Indexes ──────────────────────────────────────────────────

    __table_args__ = (
        CheckConstraint("kategori IN ('AMB', 'MCB')", name="chk_master_products_kategori"),
        CheckConstraint("std_pallet >= 0", name="chk_std_pallet_positive"),
        CheckConstraint("isi_dus >= 0", name="chk_isi_dus_positive"),
        UniqueConstraint("kode_barang", name="uk_master_products_kode"),
        UniqueConstraint("tipe", name="uk_master_products_tipe"),
        Index("idx_master_products_kategori", "kategori"),
    )

    def __repr__(self) -> str:
        return f"<MasterProduct id={self.id} code={self.code!r} category={self.category!r}>"
