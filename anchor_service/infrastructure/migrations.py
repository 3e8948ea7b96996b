"""Migration Runner: applies alembic revisions before the service accepts traffic.

Invariants:
    - Runs at most once per process, inside the lifespan, before init_db
    - Uses the packaged migrations directory, never the working directory

Design Decisions:
    - alembic's env.py drives its own event loop (asyncio.run), so the upgrade
      runs in a worker thread instead of on the serving loop
"""

import asyncio
import logging
from pathlib import Path

from alembic import command
from alembic.config import Config

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"


def build_alembic_config(database_url: str) -> Config:
    """Alembic config pointing at the packaged scripts and the given database."""
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    # configparser interpolation: escape percent-encoded credentials
    config.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    return config


def upgrade_to_head(database_url: str) -> None:
    command.upgrade(build_alembic_config(database_url), "head")


async def run_migrations(database_url: str) -> None:
    logger.info("Running database migrations...")
    await asyncio.to_thread(upgrade_to_head, database_url)
    logger.info("Database migrations complete")
