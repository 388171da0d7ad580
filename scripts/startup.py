#!/usr/bin/env python3
"""Startup tasks run before the API server: migrate, then seed demo data.

Seeding is skipped when SEED_DEMO_DATA is set to 0/false/no.
"""
import logging
import os
import sys
from pathlib import Path

# Add parent directory to path so we can import webhook_studio modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from scripts.run_migrations import main as run_migrations_main
from scripts.seed_demo_data import main as seed_main
from webhook_studio.core.logging_config import configure_logging

logger = logging.getLogger(__name__)


def main() -> int:
    """Run startup tasks.

    Returns:
        Exit code (0 = success, 1 = failure)
    """
    configure_logging()
    logger.info("Running database migrations...")
    if run_migrations_main() != 0:
        logger.error("Migrations failed. Exiting.")
        return 1

    if os.getenv("SEED_DEMO_DATA", "1").lower() in ("0", "false", "no"):
        logger.info("Demo seed disabled")
    elif seed_main() != 0:
        logger.error("Demo seed failed. Exiting.")
        return 1

    logger.info("Startup completed successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
