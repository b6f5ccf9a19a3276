#!/usr/bin/env python3
"""
Bring the folders schema up to date.

Runs the Alembic revisions in-process against Config.DATABASE_URL (or the
development SQLite file), so deployments need no `alembic` executable on PATH.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from alembic import command
from alembic.config import Config as AlembicConfig
from sqlalchemy.exc import SQLAlchemyError

from folder_viewer.config import Config
from folder_viewer.database import get_database_url

logger = logging.getLogger(__name__)

ROOT_DIR = Path(__file__).resolve().parent


def build_alembic_config(database_url: Optional[str] = None) -> AlembicConfig:
    alembic_cfg = AlembicConfig(str(ROOT_DIR / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(ROOT_DIR / "alembic"))
    # Escape % so configparser interpolation leaves URL-encoded passwords alone.
    url = database_url or Config.DATABASE_URL or get_database_url()
    alembic_cfg.set_main_option("sqlalchemy.url", url.replace("%", "%%"))
    alembic_cfg.attributes["configure_logger"] = False
    return alembic_cfg


def run_migrations(database_url: Optional[str] = None, revision: str = "head") -> int:
    """Upgrade the database to `revision`. Returns a process exit status."""
    alembic_cfg = build_alembic_config(database_url)
    logger.info("Upgrading folders schema to %s", revision)

    try:
        command.upgrade(alembic_cfg, revision)
    except (SQLAlchemyError, ValueError) as e:
        logger.error("Migration failed: %s", e)
        return 1

    logger.info("Migrations completed")
    return 0


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Run folder viewer database migrations")
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    parser.add_argument("--revision", default="head", help="Target revision")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=Config.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return run_migrations(args.database_url, args.revision)


if __name__ == "__main__":
    sys.exit(main())
