"""Initial schema: anchors, assets.

Revision ID: 001_anchors_assets
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_anchors_assets"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "anchors",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("account_reference", sa.String(56), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("home_domain", sa.String(255), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("trust_score", sa.Float, nullable=True),
        sa.Column("reliability_score", sa.Float, nullable=True),
        sa.Column("total_transactions", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("successful_transactions", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("failed_transactions", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("total_volume_usd", sa.Float, nullable=False, server_default="0"),
        sa.Column("avg_settlement_time_ms", sa.BigInteger, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("account_reference", name="uq_anchors_account_reference"),
    )

    op.create_table(
        "assets",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("anchor_id", UUID(as_uuid=True), sa.ForeignKey("anchors.id"), nullable=False),
        sa.Column("code", sa.String(12), nullable=False),
        sa.Column("issuer", sa.String(56), nullable=True),
        sa.Column("total_supply", sa.Float, nullable=True),
        sa.Column("num_holders", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_assets_anchor_id", "assets", ["anchor_id"])


def downgrade() -> None:
    op.drop_index("ix_assets_anchor_id", table_name="assets")
    op.drop_table("assets")
    op.drop_table("anchors")
