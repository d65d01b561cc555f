"""
Logging configuration.

Configures the loguru logger for workers and scripts.
Sets up log rotation and retention policies.
"""

import sys

from loguru import logger

from app.config.settings import Settings, settings as default_settings


def setup_logging(settings: Settings | None = None) -> None:
    """Configure logger with stderr output and file rotation."""
    settings = settings or default_settings

    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)
    logger.add(
        settings.log_file,
        rotation="1 day",
        retention="7 days",
        level=settings.log_level,
        encoding="utf-8",
    )

    logger.info(
        f"Logging configured: level={settings.log_level}, "
        f"environment={settings.environment}"
    )
