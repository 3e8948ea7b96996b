"""Route Dependencies: wire a per-request repository onto the pooled session."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from anchor_service.core.repository_protocols import AnchorStore
from anchor_service.infrastructure.database import get_db
from anchor_service.repositories.anchor_repository import AnchorRepository


async def get_anchor_repository(
    db: AsyncSession = Depends(get_db),
) -> AnchorStore:
    return AnchorRepository(db)
