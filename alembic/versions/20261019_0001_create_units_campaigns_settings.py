"""create units, campaigns and user_settings tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "units",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("unit_id", sa.String(length=100), nullable=False, comment="User-facing business identifier"),
        sa.Column("location", sa.String(length=255), nullable=False),
        sa.Column("governorate", sa.String(length=100), nullable=False, comment="Administrative region"),
        sa.Column("lat_lng", sa.String(length=64), nullable=False, comment='Coordinate pair encoded as "<lat>,<lng>"'),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("unit_id", name="uq_units_unit_id"),
    )
    op.create_index("ix_units_governorate", "units", ["governorate"], unique=False)
    op.create_index("ix_units_created_at", "units", ["created_at"], unique=False)

    op.create_table(
        "campaigns",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column(
            "unit_ids",
            sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), "postgresql"),
            nullable=False,
        ),
        sa.Column("export_url", sa.String(length=500), nullable=True, comment="Shareable map URL, set once published"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_campaigns_created_at", "campaigns", ["created_at"], unique=False)

    op.create_table(
        "user_settings",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("default_zoom", sa.Integer(), nullable=False),
        sa.Column("default_center_lat", sa.Float(), nullable=False),
        sa.Column("default_center_lng", sa.Float(), nullable=False),
        sa.Column("preferred_governorate", sa.String(length=100), nullable=True),
        sa.Column("map_style", sa.String(length=50), nullable=False),
        sa.Column("marker_style", sa.String(length=50), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("user_settings")
    op.drop_index("ix_campaigns_created_at", table_name="campaigns")
    op.drop_table("campaigns")
    op.drop_index("ix_units_created_at", table_name="units")
    op.drop_index("ix_units_governorate", table_name="units")
    op.drop_table("units")
