"""
db/models/region.py

Master region model: one sales region / branch.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Index, String, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db.base import Base

if TYPE_CHECKING:
    from db.models.sales_plan import SalesPlan


class MasterRegion(Base):
    """
    A sales region or branch (e.g., JTM, SBY, KDR).

    Inactive regions are kept for history but hidden from region pickers.
    """

    __tablename__ = "master_regions"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    code: Mapped[str] = mapped_column(
        "kode",
        String(10),
        nullable=False,
    )

    name: Mapped[str] = mapped_column(
        "nama",
        String(100),
        nullable=False,
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        comment="Whether this region is currently active",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    sales_plans: Mapped[list["SalesPlan"]] = relationship(
        "SalesPlan",
        back_populates="region",
        passive_deletes=True,
    )

    __table_args__ = (
        UniqueConstraint("kode", name="uk_master_regions_kode"),
        Index("idx_master_regions_active", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<MasterRegion id={self.id} code={self.code!r} active={self.is_active}>"
