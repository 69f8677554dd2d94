"""Logging for the wellness reminder scheduler.

Everything goes to a dated file under LOG_DIR; reminders and warnings are
echoed to the console when running in a terminal. The level comes from
REMINDER_LOG_LEVEL (DEBUG shows per-tick skip reasons such as missing
notification permission).
"""

import logging
import sys
from datetime import datetime

from config import LOG_DIR, LOG_LEVEL


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def setup_logging(level_name: str = LOG_LEVEL) -> logging.Logger:
    """Configure the "wellness_reminders" logger (file + optional console)."""
    level = _resolve_level(level_name)

    logger = logging.getLogger("wellness_reminders")
    logger.setLevel(level)

    # Re-running setup (tests, reloads) must not stack handlers
    logger.handlers.clear()

    log_file = LOG_DIR / f"reminders-{datetime.now().strftime('%Y-%m-%d')}.log"
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(module)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))
    logger.addHandler(file_handler)

    if sys.stdout is not None and sys.stdout.isatty():
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(max(level, logging.INFO))
        console_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s", datefmt="%H:%M"))
        logger.addHandler(console_handler)

    return logger


logger = setup_logging()
