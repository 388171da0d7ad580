#!/usr/bin/env python3
"""Run Alembic migrations before starting the API server.

Waits for the database, reports the current revision and upgrades to head.
"""
import logging
import sys
import time
from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.script import ScriptDirectory
from sqlalchemy import inspect, text
from sqlalchemy.exc import OperationalError

# Add parent directory to path so we can import webhook_studio modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from webhook_studio.core.config import get_settings
from webhook_studio.core.db import create_db_engine
from webhook_studio.core.logging_config import configure_logging

logger = logging.getLogger(__name__)


def wait_for_db(database_url: str, attempts: int = 30, delay: float = 2.0) -> bool:
    """Poll the database with ``SELECT 1`` until it answers or ``attempts`` run out."""
    engine = create_db_engine(database_url)
    try:
        for attempt in range(1, attempts + 1):
            try:
                with engine.connect() as conn:
                    conn.execute(text("SELECT 1"))
                return True
            except OperationalError as e:
                logger.warning(f"Database not ready ({attempt}/{attempts}): {e.orig}")
                if attempt < attempts:
                    time.sleep(delay)
        return False
    finally:
        engine.dispose()


def current_revision(database_url: str) -> str | None:
    """Return the revision stamped in the database, or None before the first migration."""
    engine = create_db_engine(database_url)
    try:
        with engine.connect() as conn:
            if not inspect(conn).has_table("alembic_version"):
                return None
            return conn.execute(text("SELECT version_num FROM alembic_version")).scalar()
    finally:
        engine.dispose()


def run_migrations() -> bool:
    """Run Alembic migrations to upgrade database to latest version.

    Returns:
        True if migrations succeeded, False otherwise
    """
    try:
        alembic_ini_path = Path(__file__).parent.parent / "alembic.ini"
        if not alembic_ini_path.exists():
            logger.error(f"Alembic config not found at {alembic_ini_path}")
            return False

        alembic_cfg = Config(str(alembic_ini_path))
        settings = get_settings()
        alembic_cfg.set_main_option("sqlalchemy.url", settings.database_url)

        logger.info("Running Alembic migrations to 'head'...")

        try:
            revision = current_revision(settings.database_url)
            logger.info("Current database revision: %s", revision or "none")
        except Exception as e:
            logger.warning(f"Could not check current revision: {e}")

        script = ScriptDirectory.from_config(alembic_cfg)
        for rev in script.walk_revisions():
            logger.info("Available migration %s: %s", rev.revision, rev.doc)

        command.upgrade(alembic_cfg, "head")

        logger.info("Migrations completed successfully")
        return True

    except Exception as e:
        logger.error(f"Migration failed: {e}", exc_info=True)
        return False


def main() -> int:
    """Main entry point for migration script.

    Returns:
        Exit code (0 = success, 1 = failure)
    """
    configure_logging()
    settings = get_settings()

    if not wait_for_db(settings.database_url):
        logger.error("Database did not become available. Exiting.")
        return 1

    if not run_migrations():
        logger.error("Migrations failed. Exiting.")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
