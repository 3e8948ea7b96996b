"""AnchorRepository: identity, relationship and partial-update guarantees against SQLite.

Invariants:
    - create then get_anchor_by_account round-trips the profile
    - A second create with the same account raises ConflictError and adds no row
    - update_anchor_metrics is idempotent and never touches profile fields
    - create_asset against a missing anchor raises NotFoundError and adds no row
    - list_assets_for_anchor returns [] for an anchor with no assets
"""

import pytest
from uuid import uuid4
from sqlalchemy import func, select

from anchor_service.core.errors import (
    ConflictError, InvalidInputError, NotFoundError,
)
from anchor_service.models.anchor import Anchor
from anchor_service.models.asset import Asset
from anchor_service.repositories.anchor_repository import AnchorRepository
from anchor_service.schemas.anchor import AnchorCreate, AnchorMetricsUpdate
from anchor_service.schemas.asset import AssetCreate


def _anchor(account: str = "GABC...XYZ", name: str = "Acme Anchor", **extra) -> AnchorCreate:
    return AnchorCreate(account_reference=account, name=name, **extra)


async def _count(session_factory, model) -> int:
    async with session_factory() as db:
        result = await db.execute(select(func.count()).select_from(model))
        return result.scalar_one()


# --- create / get ---------------------------------------------------------------

async def test_create_then_get_by_account_returns_matching_anchor(
    repository, test_session_factory,
):
    created = await repository.create_anchor(
        _anchor(home_domain="acme.io", description="Fiat on-ramp"),
    )
    assert created.id is not None

    async with test_session_factory() as db:
        fetched = await AnchorRepository(db).get_anchor_by_account("GABC...XYZ")
    assert fetched.id == created.id
    assert fetched.name == "Acme Anchor"
    assert fetched.home_domain == "acme.io"
    assert fetched.description == "Fiat on-ramp"
    assert fetched.total_transactions == 0


async def test_create_strips_whitespace(repository):
    created = await repository.create_anchor(_anchor(account="  GSTRIP  ", name=" Acme "))
    assert created.account_reference == "GSTRIP"
    assert created.name == "Acme"


async def test_duplicate_account_raises_conflict(repository, test_session_factory):
    await repository.create_anchor(_anchor())
    with pytest.raises(ConflictError):
        await repository.create_anchor(_anchor(name="Impostor"))
    assert await _count(test_session_factory, Anchor) == 1


async def test_repository_usable_after_conflict(repository):
    await repository.create_anchor(_anchor())
    with pytest.raises(ConflictError):
        await repository.create_anchor(_anchor())
    other = await repository.create_anchor(_anchor(account="GOTHER"))
    assert other.account_reference == "GOTHER"


async def test_create_rejects_empty_account_reference(repository, test_session_factory):
    with pytest.raises(InvalidInputError) as exc_info:
        await repository.create_anchor(_anchor(account="   "))
    assert exc_info.value.field == "account_reference"
    assert await _count(test_session_factory, Anchor) == 0


async def test_get_by_id_misses(repository):
    with pytest.raises(NotFoundError):
        await repository.get_anchor_by_id(str(uuid4()))


async def test_get_by_id_malformed_is_not_found(repository):
    with pytest.raises(NotFoundError):
        await repository.get_anchor_by_id("nonexistent-id")


async def test_get_by_account_misses(repository):
    with pytest.raises(NotFoundError):
        await repository.get_anchor_by_account("GNOPE")


async def test_misses_carry_error_context(repository):
    missing = str(uuid4())
    with pytest.raises(NotFoundError) as by_id:
        await repository.get_anchor_by_id(missing)
    assert by_id.value.context.anchor_id == missing

    with pytest.raises(NotFoundError) as by_account:
        await repository.get_anchor_by_account("GNOPE")
    assert by_account.value.context.account_reference == "GNOPE"


async def test_list_anchors_ordered_by_creation(repository):
    first = await repository.create_anchor(_anchor(account="G1", name="First"))
    second = await repository.create_anchor(_anchor(account="G2", name="Second"))
    anchors = await repository.list_anchors()
    assert [a.id for a in anchors] == [first.id, second.id]


async def test_list_anchors_empty(repository):
    assert await repository.list_anchors() == []


# --- metrics ------------------------------------------------------------------------

async def test_update_metrics_leaves_profile_untouched(repository, test_session_factory):
    created = await repository.create_anchor(
        _anchor(home_domain="acme.io", description="desc"),
    )
    await repository.update_anchor_metrics(
        str(created.id), AnchorMetricsUpdate(trust_score=0.92),
    )

    async with test_session_factory() as db:
        fetched = await AnchorRepository(db).get_anchor_by_id(str(created.id))
    assert fetched.trust_score == 0.92
    assert fetched.name == "Acme Anchor"
    assert fetched.home_domain == "acme.io"
    assert fetched.description == "desc"
    assert fetched.account_reference == "GABC...XYZ"


async def test_update_metrics_leaves_other_metrics_untouched(repository):
    created = await repository.create_anchor(_anchor())
    await repository.update_anchor_metrics(
        str(created.id),
        AnchorMetricsUpdate(total_transactions=10, successful_transactions=7),
    )
    updated = await repository.update_anchor_metrics(
        str(created.id), AnchorMetricsUpdate(reliability_score=88.5),
    )
    assert updated.total_transactions == 10
    assert updated.successful_transactions == 7
    assert updated.reliability_score == 88.5


async def test_update_metrics_is_idempotent(repository):
    created = await repository.create_anchor(_anchor())
    payload = AnchorMetricsUpdate(
        trust_score=0.5, total_transactions=20, failed_transactions=2,
    )

    once = await repository.update_anchor_metrics(str(created.id), payload)
    snapshot = {
        c: getattr(once, c) for c in (
            "trust_score", "total_transactions", "failed_transactions",
            "successful_transactions", "name", "created_at",
        )
    }
    first_updated_at = once.updated_at

    twice = await repository.update_anchor_metrics(str(created.id), payload)
    for column, value in snapshot.items():
        assert getattr(twice, column) == value
    assert twice.updated_at >= first_updated_at


async def test_update_metrics_can_set_zero(repository):
    created = await repository.create_anchor(_anchor())
    await repository.update_anchor_metrics(
        str(created.id), AnchorMetricsUpdate(trust_score=0.8),
    )
    updated = await repository.update_anchor_metrics(
        str(created.id), AnchorMetricsUpdate(trust_score=0.0),
    )
    assert updated.trust_score == 0.0


async def test_update_metrics_missing_anchor(repository):
    with pytest.raises(NotFoundError):
        await repository.update_anchor_metrics(
            str(uuid4()), AnchorMetricsUpdate(trust_score=0.1),
        )


async def test_update_metrics_rejects_negative(repository):
    created = await repository.create_anchor(_anchor())
    with pytest.raises(InvalidInputError) as exc_info:
        await repository.update_anchor_metrics(
            str(created.id), AnchorMetricsUpdate(total_volume_usd=-1.0),
        )
    assert exc_info.value.context.anchor_id == str(created.id)


async def test_update_metrics_rejects_inconsistent_merged_totals(repository):
    created = await repository.create_anchor(_anchor())
    await repository.update_anchor_metrics(
        str(created.id), AnchorMetricsUpdate(total_transactions=5),
    )
    with pytest.raises(InvalidInputError):
        await repository.update_anchor_metrics(
            str(created.id), AnchorMetricsUpdate(successful_transactions=6),
        )


async def test_update_metrics_rejects_empty_payload(repository):
    created = await repository.create_anchor(_anchor())
    with pytest.raises(InvalidInputError):
        await repository.update_anchor_metrics(str(created.id), AnchorMetricsUpdate())


# --- assets ---------------------------------------------------------------------------

async def test_create_asset_for_existing_anchor(repository):
    anchor = await repository.create_anchor(_anchor())
    asset = await repository.create_asset(
        str(anchor.id), AssetCreate(code="USD", issuer="GISSUER"),
    )
    assert asset.anchor_id == anchor.id
    assert asset.code == "USD"
    assert asset.num_holders == 0


async def test_create_asset_missing_anchor_creates_nothing(
    repository, test_session_factory,
):
    with pytest.raises(NotFoundError):
        await repository.create_asset(str(uuid4()), AssetCreate(code="USD"))
    assert await _count(test_session_factory, Asset) == 0


async def test_create_asset_rejects_empty_code(repository):
    anchor = await repository.create_anchor(_anchor())
    with pytest.raises(InvalidInputError):
        await repository.create_asset(str(anchor.id), AssetCreate(code=" "))


async def test_list_assets_empty_for_anchor_without_assets(repository):
    anchor = await repository.create_anchor(_anchor())
    assert await repository.list_assets_for_anchor(str(anchor.id)) == []


async def test_list_assets_scoped_to_anchor(repository):
    acme = await repository.create_anchor(_anchor(account="GACME"))
    other = await repository.create_anchor(_anchor(account="GOTHER"))
    usd = await repository.create_asset(str(acme.id), AssetCreate(code="USD"))
    eur = await repository.create_asset(str(acme.id), AssetCreate(code="EUR"))
    await repository.create_asset(str(other.id), AssetCreate(code="BRL"))

    assets = await repository.list_assets_for_anchor(str(acme.id))
    assert [a.id for a in assets] == [usd.id, eur.id]


async def test_list_assets_missing_anchor(repository):
    with pytest.raises(NotFoundError):
        await repository.list_assets_for_anchor(str(uuid4()))
