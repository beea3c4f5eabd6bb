"""Loguru configuration for Project Master."""

import sys
from pathlib import Path

from loguru import logger

from project_master.core.config import Settings, get_settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def configure_logging(settings: Settings | None = None) -> None:
    """Configure loguru based on settings.

    Replaces the default handler with a colorized stderr sink and, when
    ``project_master_log_dir`` is set, adds a daily rotated file sink.

    Args:
        settings: Optional settings override. Uses cached settings if not provided.
    """
    settings = settings or get_settings()

    logger.remove()  # Remove default handler

    level = "DEBUG" if settings.project_master_debug else settings.project_master_log_level

    logger.add(
        sys.stderr,
        level=level,
        format=LOG_FORMAT,
        colorize=True,
    )

    if settings.project_master_log_dir:
        logs_dir = Path(settings.project_master_log_dir)
        logs_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            str(logs_dir / "project_master_{time:YYYY-MM-DD}.log"),
            rotation="1 day",
            retention="7 days",
            level=settings.project_master_log_level,
            format=LOG_FORMAT,
        )
