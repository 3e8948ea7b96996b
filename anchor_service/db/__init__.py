"""Database Layer: SQLAlchemy declarative base shared by all ORM models."""
