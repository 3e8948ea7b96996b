"""Asset ORM: an instrument issued or handled by exactly one anchor.

Invariants:
    - anchor_id FK to anchors.id, not null, never reassigned
    - code is non-empty (checked before insert)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, BigInteger, Float, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from anchor_service.core.domain_types import MAX_ASSET_CODE_LENGTH, MAX_ISSUER_LENGTH
from anchor_service.db.base import Base


class Asset(Base):
    """Asset entity, owned by one Anchor."""
    __tablename__ = "assets"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    anchor_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("anchors.id"), nullable=False, index=True,
    )
    code: Mapped[str] = mapped_column(String(MAX_ASSET_CODE_LENGTH), nullable=False)
    issuer: Mapped[str | None] = mapped_column(
        String(MAX_ISSUER_LENGTH), nullable=True,
    )
    total_supply: Mapped[float | None] = mapped_column(Float, nullable=True)
    num_holders: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
