"""Anchor Repository: the only component that reads or writes anchor and asset rows.

Invariants:
    - One AnchorRepository per request, wrapping that request's AsyncSession
    - Every write commits exactly once; reads never mutate
    - Only AnchorServiceError subclasses leave this module; raw driver detail is logged
    - account_reference uniqueness is decided by the store's unique constraint,
      never by a read-then-insert sequence
    - Malformed ids are misses (NotFoundError), not validation failures

Design Decisions:
    - Business checks delegated to core/enforce_anchor.py (pure), raised here as
      InvalidInputError so direct callers get the same guarantees as HTTP callers
    - create_asset checks the anchor first for a clean 404, and still classifies an
      FK rejection at commit as NotFoundError
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from anchor_service.core.enforce_anchor import (
    check_transaction_totals,
    parse_entity_id,
    validate_anchor_create,
    validate_asset_create,
    validate_metrics_update,
)
from anchor_service.core.errors import (
    AnchorServiceError,
    ConflictError,
    ErrorContext,
    InvalidInputError,
    InvariantViolationError,
    NotFoundError,
    StorageUnavailableError,
)
from anchor_service.models.anchor import Anchor
from anchor_service.models.asset import Asset
from anchor_service.schemas.anchor import AnchorCreate, AnchorMetricsUpdate
from anchor_service.schemas.asset import AssetCreate

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _raise_on(error: dict | None, context: ErrorContext | None = None) -> None:
    if error is not None:
        raise InvalidInputError(error["message"], error["field"], context)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


class AnchorRepository:
    """Anchor and asset persistence over a single AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def _storage(self, operation: str) -> AsyncGenerator[None, None]:
        """Classify any unhandled SQLAlchemy failure as StorageUnavailableError."""
        try:
            yield
        except AnchorServiceError:
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"Storage failure during {operation}: {e}",
                extra={"operation": operation},
            )
            raise StorageUnavailableError("Storage operation failed", operation) from e

    # --- Anchors -------------------------------------------------------------

    async def create_anchor(self, data: AnchorCreate) -> Anchor:
        """Insert a new anchor. ConflictError if the account is already registered."""
        fields = data.model_dump()
        _raise_on(validate_anchor_create(fields))
        account_reference = fields["account_reference"].strip()

        anchor = Anchor(
            account_reference=account_reference,
            name=fields["name"].strip(),
            home_domain=_clean(fields.get("home_domain")),
            description=fields.get("description"),
        )
        async with self._storage("create_anchor"):
            self.db.add(anchor)
            try:
                await self.db.commit()
            except IntegrityError:
                await self.db.rollback()
                logger.info(
                    "Anchor account already registered",
                    extra={"account_reference": account_reference},
                )
                raise ConflictError(
                    f"Anchor with account '{account_reference}' already exists",
                    ErrorContext(account_reference=account_reference),
                )
        logger.info(
            "Anchor created",
            extra={"anchor_id": anchor.id, "account_reference": account_reference},
        )
        return anchor

    async def list_anchors(self) -> list[Anchor]:
        """All anchors, oldest first."""
        async with self._storage("list_anchors"):
            result = await self.db.execute(
                select(Anchor).order_by(Anchor.created_at.asc(), Anchor.id.asc()),
            )
            return list(result.scalars().all())

    async def get_anchor_by_id(self, anchor_id: str) -> Anchor:
        parsed = parse_entity_id(anchor_id)
        if parsed is None:
            raise NotFoundError(
                "Anchor", str(anchor_id), ErrorContext(anchor_id=str(anchor_id)),
            )
        async with self._storage("get_anchor_by_id"):
            result = await self.db.execute(
                select(Anchor).where(Anchor.id == parsed),
            )
            anchor = result.scalar_one_or_none()
        if anchor is None:
            raise NotFoundError(
                "Anchor", str(anchor_id), ErrorContext(anchor_id=str(anchor_id)),
            )
        return anchor

    async def get_anchor_by_account(self, account_reference: str) -> Anchor:
        """Exact lookup by account. Duplicates are a data-integrity fault."""
        account_reference = (account_reference or "").strip()
        async with self._storage("get_anchor_by_account"):
            result = await self.db.execute(
                select(Anchor).where(Anchor.account_reference == account_reference),
            )
            anchors = result.scalars().all()
        if not anchors:
            raise NotFoundError(
                "Anchor", account_reference,
                ErrorContext(account_reference=account_reference),
            )
        if len(anchors) > 1:
            logger.critical(
                f"{len(anchors)} anchors share one account reference",
                extra={
                    "account_reference": account_reference,
                    "error_code": "INVARIANT_VIOLATION",
                },
            )
            raise InvariantViolationError(
                f"Duplicate anchors for account '{account_reference}'",
                ErrorContext(account_reference=account_reference),
            )
        return anchors[0]

    async def update_anchor_metrics(
        self, anchor_id: str, metrics: AnchorMetricsUpdate,
    ) -> Anchor:
        """Merge the supplied metric fields into the anchor; nothing else changes."""
        changes = metrics.supplied_fields()
        _raise_on(
            validate_metrics_update(changes), ErrorContext(anchor_id=str(anchor_id)),
        )
        anchor = await self.get_anchor_by_id(anchor_id)

        merged = {
            "total_transactions": anchor.total_transactions,
            "successful_transactions": anchor.successful_transactions,
            "failed_transactions": anchor.failed_transactions,
        }
        merged.update(
            {k: v for k, v in changes.items() if k in merged},
        )
        _raise_on(check_transaction_totals(
            merged["total_transactions"],
            merged["successful_transactions"],
            merged["failed_transactions"],
        ), ErrorContext(anchor_id=str(anchor.id)))

        async with self._storage("update_anchor_metrics"):
            for field, value in changes.items():
                setattr(anchor, field, value)
            anchor.updated_at = _utc_now()
            await self.db.commit()
        logger.info(
            f"Anchor metrics updated: {sorted(changes)}",
            extra={"anchor_id": anchor.id},
        )
        return anchor

    # --- Assets --------------------------------------------------------------

    async def create_asset(self, anchor_id: str, data: AssetCreate) -> Asset:
        """Insert an asset owned by an existing anchor."""
        fields = data.model_dump()
        anchor = await self.get_anchor_by_id(anchor_id)
        _raise_on(validate_asset_create(fields), ErrorContext(anchor_id=str(anchor.id)))

        asset = Asset(
            anchor_id=anchor.id,
            code=fields["code"].strip(),
            issuer=_clean(fields.get("issuer")),
            total_supply=fields.get("total_supply"),
            num_holders=fields.get("num_holders") or 0,
        )
        async with self._storage("create_asset"):
            self.db.add(asset)
            try:
                await self.db.commit()
            except IntegrityError:
                # FK rejected: the anchor vanished between lookup and insert
                await self.db.rollback()
                raise NotFoundError(
                    "Anchor", str(anchor_id), ErrorContext(anchor_id=str(anchor_id)),
                )
        logger.info(
            f"Asset {asset.code} created",
            extra={"anchor_id": anchor.id},
        )
        return asset

    async def list_assets_for_anchor(self, anchor_id: str) -> list[Asset]:
        """Assets owned by the anchor, oldest first. Empty list if it owns none."""
        anchor = await self.get_anchor_by_id(anchor_id)
        async with self._storage("list_assets_for_anchor"):
            result = await self.db.execute(
                select(Asset)
                .where(Asset.anchor_id == anchor.id)
                .order_by(Asset.created_at.asc(), Asset.id.asc()),
            )
            return list(result.scalars().all())
