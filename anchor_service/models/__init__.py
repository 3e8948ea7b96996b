"""ORM Models: SQLAlchemy declarative models for anchors and assets.

Invariants:
    - All models inherit from Base (db/base.py)
    - Asset references Anchor by foreign key only; no ORM relationship is mapped

Design Decisions:
    - One file per entity
    - All models imported here so Base.metadata is complete for create_all and alembic
"""

from anchor_service.models.anchor import Anchor  # noqa: F401
from anchor_service.models.asset import Asset  # noqa: F401
