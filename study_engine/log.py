"""loguru sink setup for scripts and the dashboard."""

from __future__ import annotations

import sys
from typing import Optional

from loguru import logger

from study_engine.config import get_settings


def configure_logging(level: Optional[str] = None) -> None:
    """Replace loguru's default handler with a compact stderr sink."""

    logger.remove()
    logger.add(
        sys.stderr,
        level=(level or get_settings().log_level).upper(),
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {name} | {message}",
    )
