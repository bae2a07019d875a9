"""
config.py
File locations and logging setup. Every value can be overridden from the environment.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from loguru import logger

DATA_DIR = Path(os.environ.get("SWIMCLUB_DATA_DIR", Path(__file__).with_name("data")))

MEMBERS_FILE = DATA_DIR / "members.dat"
PAYMENTS_FILE = DATA_DIR / "payments.dat"
REMINDERS_FILE = DATA_DIR / "reminders.dat"
RATES_FILE = DATA_DIR / "paymentRates.dat"
USERS_FILE = DATA_DIR / "users.dat"

LOG_FILE = Path(os.environ.get("SWIMCLUB_LOG_FILE", DATA_DIR / "logs" / "swimclub.log"))
LOG_LEVEL = os.environ.get("SWIMCLUB_LOG_LEVEL", "INFO")


def configure_logging(level: str = LOG_LEVEL, log_file: Path | None = LOG_FILE) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )
    if log_file is not None:
        logger.add(
            str(log_file),
            level=level,
            rotation="1 MB",
            retention=5,
            encoding="utf-8",
        )
