"""Infrastructure Layer: database engine, migrations and logging setup.

Invariants:
    - Infrastructure never imports route modules
    - SQLAlchemy exceptions leaving this layer are already classified
"""
