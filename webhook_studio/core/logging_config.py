"""Logging setup shared by the API process and the maintenance scripts."""
import logging

from .config import get_settings

LOG_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once using the level from settings."""

    resolved = (level or get_settings().log_level).upper()
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    # httpx logs every request at INFO; the executor already does
    logging.getLogger("httpx").setLevel(logging.WARNING)
