"""Anchor Schemas: creation, partial metrics update and response shapes.

Invariants:
    - AnchorCreate carries profile fields only; metrics start at their defaults
    - AnchorMetricsUpdate fields are all optional and undefaulted in meaning:
      presence is read from model_fields_set, so "absent" and "0" differ
"""

from datetime import datetime
from uuid import UUID

from anchor_service.schemas import ApiModel


class AnchorCreate(ApiModel):
    """Anchor creation payload."""
    account_reference: str
    name: str
    home_domain: str | None = None
    description: str | None = None


class AnchorMetricsUpdate(ApiModel):
    """Partial metrics payload. Only fields the caller sent are merged."""
    trust_score: float | None = None
    reliability_score: float | None = None
    total_transactions: int | None = None
    successful_transactions: int | None = None
    failed_transactions: int | None = None
    total_volume_usd: float | None = None
    avg_settlement_time_ms: int | None = None

    def supplied_fields(self) -> dict:
        """Fields explicitly present in the payload, explicit nulls included."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class AnchorResponse(ApiModel):
    id: UUID
    account_reference: str
    name: str
    home_domain: str | None
    description: str | None
    trust_score: float | None
    reliability_score: float | None
    total_transactions: int
    successful_transactions: int
    failed_transactions: int
    total_volume_usd: float
    avg_settlement_time_ms: int | None
    created_at: datetime
    updated_at: datetime
