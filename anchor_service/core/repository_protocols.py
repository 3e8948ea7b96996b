"""Boundary Protocols: the contract between request handlers and storage.

Invariants:
    - Routes depend on AnchorStore, never on AsyncSession or SQLAlchemy types
    - Implementations raise only AnchorServiceError subclasses

Design Decisions:
    - Protocol over ABC: structural subtyping lets tests pass a plain fake store
"""

from typing import Protocol, Sequence

from anchor_service.models.anchor import Anchor
from anchor_service.models.asset import Asset
from anchor_service.schemas.anchor import AnchorCreate, AnchorMetricsUpdate
from anchor_service.schemas.asset import AssetCreate


class AnchorStore(Protocol):
    """Contract for anchor and asset persistence, implemented by AnchorRepository."""
    async def create_anchor(self, data: AnchorCreate) -> Anchor: ...
    async def list_anchors(self) -> Sequence[Anchor]: ...
    async def get_anchor_by_id(self, anchor_id: str) -> Anchor: ...
    async def get_anchor_by_account(self, account_reference: str) -> Anchor: ...
    async def update_anchor_metrics(
        self, anchor_id: str, metrics: AnchorMetricsUpdate,
    ) -> Anchor: ...
    async def create_asset(self, anchor_id: str, data: AssetCreate) -> Asset: ...
    async def list_assets_for_anchor(self, anchor_id: str) -> Sequence[Asset]: ...
