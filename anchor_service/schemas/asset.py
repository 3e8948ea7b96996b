"""Asset Schemas: creation payload and response shape."""

from datetime import datetime
from uuid import UUID

from anchor_service.schemas import ApiModel


class AssetCreate(ApiModel):
    """Asset creation payload. The owning anchor comes from the path."""
    code: str
    issuer: str | None = None
    total_supply: float | None = None
    num_holders: int | None = None


class AssetResponse(ApiModel):
    id: UUID
    anchor_id: UUID
    code: str
    issuer: str | None
    total_supply: float | None
    num_holders: int
    created_at: datetime
    updated_at: datetime
