"""Domain Types: identity wrappers and field limits shared by schemas, models and checks.

Invariants:
    - AnchorId wraps UUIDs
    - Length limits match the column sizes in models/ and the 001 migration
"""

from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

AnchorId = NewType("AnchorId", UUID)


# ─── Field Limits ────────────────────────────────────────────────

MAX_ACCOUNT_REFERENCE_LENGTH = 56   # Stellar account ids are 56 chars
MAX_NAME_LENGTH = 255
MAX_HOME_DOMAIN_LENGTH = 255
MAX_ASSET_CODE_LENGTH = 12          # Stellar alphanum12
MAX_ISSUER_LENGTH = 56

TRUST_SCORE_MAX = 1.0
RELIABILITY_SCORE_MAX = 100.0

# Counts and durations are stored as BIGINT (signed 64-bit)
MAX_COUNT_VALUE = 2**63 - 1


# ─── Metric Fields ───────────────────────────────────────────────

# Every field update_anchor_metrics may touch. Profile fields never appear here.
METRIC_FIELDS = (
    "trust_score",
    "reliability_score",
    "total_transactions",
    "successful_transactions",
    "failed_transactions",
    "total_volume_usd",
    "avg_settlement_time_ms",
)

BOUNDED_METRICS = {
    "trust_score": TRUST_SCORE_MAX,
    "reliability_score": RELIABILITY_SCORE_MAX,
    "total_transactions": MAX_COUNT_VALUE,
    "successful_transactions": MAX_COUNT_VALUE,
    "failed_transactions": MAX_COUNT_VALUE,
    "avg_settlement_time_ms": MAX_COUNT_VALUE,
}
