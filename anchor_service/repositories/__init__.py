"""Repositories: SQLAlchemy-backed implementations of core/repository_protocols.py."""

from anchor_service.repositories.anchor_repository import AnchorRepository  # noqa: F401
