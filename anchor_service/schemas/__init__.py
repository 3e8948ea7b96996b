"""Pydantic Schemas: request/response contracts for API endpoints.

Invariants:
    - Schemas check shape at the system boundary (types, required keys)
    - Meaning (emptiness, ranges) is checked by core/enforce_anchor.py in the repository
    - JSON keys are camelCase on the wire; snake_case names are accepted on input
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for all wire schemas: camelCase aliases, ORM attribute loading."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
