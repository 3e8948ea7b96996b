"""Core Layer: domain types, error hierarchy and pure validation checks.

Invariants:
    - No module in core/ performs IO
    - enforce_* functions are pure and deterministic
"""
