#!/usr/bin/env python3
"""Insert the demo categories and webhooks into an empty database."""
import logging
import sys
from pathlib import Path

# Add parent directory to path so we can import webhook_studio modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from webhook_studio.core.db import session_scope
from webhook_studio.core.logging_config import configure_logging
from webhook_studio.services.seed import seed_defaults

logger = logging.getLogger(__name__)


def main() -> int:
    configure_logging()
    try:
        with session_scope() as session:
            categories, webhooks = seed_defaults(session)
    except Exception as e:
        logger.error(f"Seeding failed: {e}", exc_info=True)
        return 1

    if categories or webhooks:
        logger.info(f"Created {categories} categories and {webhooks} webhooks")
    return 0


if __name__ == "__main__":
    sys.exit(main())
