"""Anchor/Asset Validation Enforcement: business checks applied before any write.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Return error dict on violation, None on success
    - Error dicts carry the offending field so the repository can raise InvalidInputError

Design Decisions:
    - Separated from schemas/: Pydantic checks shape (types, required keys),
      these checks guard meaning (emptiness, ranges, cross-field totals)
"""

import math
from uuid import UUID

from anchor_service.core.domain_types import (
    AnchorId,
    BOUNDED_METRICS,
    MAX_ACCOUNT_REFERENCE_LENGTH,
    MAX_ASSET_CODE_LENGTH,
    MAX_COUNT_VALUE,
    MAX_HOME_DOMAIN_LENGTH,
    MAX_ISSUER_LENGTH,
    MAX_NAME_LENGTH,
    METRIC_FIELDS,
)


# --- Identifiers ---------------------------------------------------------------

def parse_entity_id(raw: str | UUID) -> AnchorId | None:
    """Parse a path identifier. Malformed ids return None (treated as a miss)."""
    if isinstance(raw, UUID):
        return AnchorId(raw)
    try:
        return AnchorId(UUID(str(raw).strip()))
    except (ValueError, AttributeError):
        return None


# --- Field checks ----------------------------------------------------------------

def check_required_text(value: str | None, field: str, max_length: int) -> dict | None:
    """Required text must be non-empty after stripping and fit its column."""
    if value is None or not value.strip():
        return _error("EMPTY_FIELD", f"{field} must not be empty.", field)
    if len(value.strip()) > max_length:
        return _error(
            "FIELD_TOO_LONG",
            f"{field} must be at most {max_length} characters.",
            field,
        )
    return None


def check_optional_text(value: str | None, field: str, max_length: int) -> dict | None:
    if value is None:
        return None
    if len(value.strip()) > max_length:
        return _error(
            "FIELD_TOO_LONG",
            f"{field} must be at most {max_length} characters.",
            field,
        )
    return None


def check_non_negative(value: float | int | None, field: str) -> dict | None:
    """Counts, volumes and durations are never negative."""
    if value is None:
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return _error("NOT_FINITE", f"{field} must be a finite number.", field)
    if value < 0:
        return _error("NEGATIVE_VALUE", f"{field} must not be negative.", field)
    return None


def check_upper_bound(value: float | int | None, field: str, upper: float) -> dict | None:
    if value is None:
        return None
    if value > upper:
        return _error("OUT_OF_RANGE", f"{field} must be between 0 and {upper}.", field)
    return None


def check_transaction_totals(
    total: int, successful: int, failed: int,
) -> dict | None:
    """successful + failed can never exceed total."""
    if successful + failed > total:
        return _error(
            "INCONSISTENT_TOTALS",
            "successful_transactions + failed_transactions exceeds total_transactions.",
            "total_transactions",
        )
    return None


# --- Composite validators ----------------------------------------------------------

def validate_anchor_create(fields: dict) -> dict | None:
    """Validate a new anchor's profile. Returns the first violation."""
    return _first_error(
        check_required_text(
            fields.get("account_reference"), "account_reference",
            MAX_ACCOUNT_REFERENCE_LENGTH,
        ),
        check_required_text(fields.get("name"), "name", MAX_NAME_LENGTH),
        check_optional_text(
            fields.get("home_domain"), "home_domain", MAX_HOME_DOMAIN_LENGTH,
        ),
    )


def validate_metrics_update(changes: dict) -> dict | None:
    """Validate a partial metrics payload (only the keys the caller supplied)."""
    if not changes:
        return _error(
            "EMPTY_UPDATE", "At least one metric field is required.", None,
        )
    for field, value in changes.items():
        if field not in METRIC_FIELDS:
            return _error("UNKNOWN_METRIC", f"{field} is not a metric field.", field)
        if value is None:
            return _error("NULL_METRIC", f"{field} must not be null.", field)
        error = check_non_negative(value, field) or check_upper_bound(
            value, field, BOUNDED_METRICS.get(field, math.inf),
        )
        if error:
            return error
    return None


def validate_asset_create(fields: dict) -> dict | None:
    return _first_error(
        check_required_text(fields.get("code"), "code", MAX_ASSET_CODE_LENGTH),
        check_optional_text(fields.get("issuer"), "issuer", MAX_ISSUER_LENGTH),
        check_non_negative(fields.get("total_supply"), "total_supply"),
        check_non_negative(fields.get("num_holders"), "num_holders"),
        check_upper_bound(fields.get("num_holders"), "num_holders", MAX_COUNT_VALUE),
    )


# --- Helpers -------------------------------------------------------------------------

def _first_error(*errors: dict | None) -> dict | None:
    return next((e for e in errors if e is not None), None)


def _error(code: str, message: str, field: str | None) -> dict:
    """Construct a standard error dict."""
    return {
        "status": "error",
        "error_code": code,
        "message": message,
        "field": field,
    }
