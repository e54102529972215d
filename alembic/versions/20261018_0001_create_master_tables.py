"""create master_products and master_regions tables

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 09:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "master_products",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("kode_barang", sa.String(length=50), nullable=False,
                  comment="Unique product code (e.g., YUAMF.001)"),
        sa.Column("nama_produk", sa.String(length=255), nullable=True),
        sa.Column("tipe", sa.String(length=50), nullable=False,
                  comment="Product type specification (e.g., NS-40-ZL)"),
        sa.Column("kategori", sa.String(length=10), nullable=False,
                  comment="AMB (car battery) or MCB (motorcycle battery)"),
        sa.Column("std_pallet", sa.Integer(), server_default=sa.text("0"), nullable=False,
                  comment="Standard quantity per pallet"),
        sa.Column("isi_dus", sa.Integer(), server_default=sa.text("0"), nullable=False,
                  comment="Number of units per box/carton"),
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
        sa.CheckConstraint("kategori IN ('AMB', 'MCB')", name="chk_master_products_kategori"),
        sa.CheckConstraint("std_pallet >= 0", name="chk_std_pallet_positive"),
        sa.CheckConstraint("isi_dus >= 0", name="chk_isi_dus_positive"),
        sa.PrimaryKeyConstraint("id", name="pk_master_products"),
        sa.UniqueConstraint("kode_barang", name="uk_master_products_kode"),
        sa.UniqueConstraint("tipe", name="uk_master_products_tipe"),
    )
    op.create_index(
        "idx_master_products_kategori",
        "master_products",
        ["kategori"],
        unique=False,
    )

    op.create_table(
        "master_regions",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("kode", sa.String(length=10), nullable=False),
        sa.Column("nama", sa.String(length=100), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False,
                  comment="Whether this region is currently active"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_master_regions"),
        sa.UniqueConstraint("kode", name="uk_master_regions_kode"),
    )
    op.create_index(
        "idx_master_regions_active",
        "master_regions",
        ["is_active"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("idx_master_regions_active", table_name="master_regions")
    op.drop_table("master_regions")
    op.drop_index("idx_master_products_kategori", table_name="master_products")
    op.drop_table("master_products")
