"""Anchor ORM: one row per external account.

Invariants:
    - id is a UUID primary key, generated on insert
    - account_reference is unique at the storage level (uq_anchors_account_reference)
    - Metric columns are written only by the metrics update path
    - updated_at changes on every write; created_at never changes
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    String, Text, BigInteger, Float, DateTime, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from anchor_service.core.domain_types import (
    MAX_ACCOUNT_REFERENCE_LENGTH, MAX_HOME_DOMAIN_LENGTH, MAX_NAME_LENGTH,
)
from anchor_service.db.base import Base


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Anchor(Base):
    """Anchor entity: profile fields plus independently updated metrics."""
    __tablename__ = "anchors"
    __table_args__ = (
        UniqueConstraint(
            "account_reference", name="uq_anchors_account_reference",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    account_reference: Mapped[str] = mapped_column(
        String(MAX_ACCOUNT_REFERENCE_LENGTH), nullable=False,
    )

    # Profile
    name: Mapped[str] = mapped_column(String(MAX_NAME_LENGTH), nullable=False)
    home_domain: Mapped[str | None] = mapped_column(
        String(MAX_HOME_DOMAIN_LENGTH), nullable=True,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Metrics
    trust_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    reliability_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    total_transactions: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
    successful_transactions: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
    failed_transactions: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
    total_volume_usd: Mapped[float] = mapped_column(
        Float, nullable=False, default=0.0,
    )
    avg_settlement_time_ms: Mapped[int | None] = mapped_column(
        BigInteger, nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utc_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utc_now,
    )
