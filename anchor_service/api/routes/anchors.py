"""Anchor Routes: HTTP surface for anchors, their metrics and their assets.

Invariants:
    - Request bodies are shape-checked by Pydantic before reaching a handler
    - Handlers call exactly one repository operation and shape its result
    - Repository errors propagate to the global handlers (api/error_handlers.py),
      which own the status-code mapping
    - Path ids are plain strings; malformed ids surface as 404 from the repository
"""

from fastapi import APIRouter, Depends, status

from anchor_service.api.dependencies import get_anchor_repository
from anchor_service.core.repository_protocols import AnchorStore
from anchor_service.schemas.anchor import (
    AnchorCreate, AnchorMetricsUpdate, AnchorResponse,
)
from anchor_service.schemas.asset import AssetCreate, AssetResponse

router = APIRouter(prefix="/anchors", tags=["anchors"])


@router.get("", response_model=list[AnchorResponse])
async def list_anchors(repo: AnchorStore = Depends(get_anchor_repository)):
    """List all anchors, oldest first."""
    anchors = await repo.list_anchors()
    return [AnchorResponse.model_validate(a) for a in anchors]


@router.post(
    "", response_model=AnchorResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_anchor(
    body: AnchorCreate, repo: AnchorStore = Depends(get_anchor_repository),
):
    """Register a new anchor. 409 if the account is already registered."""
    anchor = await repo.create_anchor(body)
    return AnchorResponse.model_validate(anchor)


@router.get("/account/{account_reference}", response_model=AnchorResponse)
async def get_anchor_by_account(
    account_reference: str, repo: AnchorStore = Depends(get_anchor_repository),
):
    anchor = await repo.get_anchor_by_account(account_reference)
    return AnchorResponse.model_validate(anchor)


@router.get("/{anchor_id}", response_model=AnchorResponse)
async def get_anchor(
    anchor_id: str, repo: AnchorStore = Depends(get_anchor_repository),
):
    anchor = await repo.get_anchor_by_id(anchor_id)
    return AnchorResponse.model_validate(anchor)


@router.put("/{anchor_id}/metrics", response_model=AnchorResponse)
async def update_anchor_metrics(
    anchor_id: str,
    body: AnchorMetricsUpdate,
    repo: AnchorStore = Depends(get_anchor_repository),
):
    """Merge the supplied metric fields; profile fields are untouched."""
    anchor = await repo.update_anchor_metrics(anchor_id, body)
    return AnchorResponse.model_validate(anchor)


@router.get("/{anchor_id}/assets", response_model=list[AssetResponse])
async def list_anchor_assets(
    anchor_id: str, repo: AnchorStore = Depends(get_anchor_repository),
):
    assets = await repo.list_assets_for_anchor(anchor_id)
    return [AssetResponse.model_validate(a) for a in assets]


@router.post(
    "/{anchor_id}/assets", response_model=AssetResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_anchor_asset(
    anchor_id: str,
    body: AssetCreate,
    repo: AnchorStore = Depends(get_anchor_repository),
):
    """Create an asset owned by the anchor. 404 if the anchor does not exist."""
    asset = await repo.create_asset(anchor_id, body)
    return AssetResponse.model_validate(asset)
