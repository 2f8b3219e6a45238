# lotmanager/utils/logger.py
"""
Logging for the lot manager: one root configuration shared by the API, the
allocation core and the setup scripts. Lines go to the console and to
logs/lotmanager.log, rotated by size. Services tag their lines ([ENTRY],
[EXIT], [SPACES], [CAPACITY], [TARIFFS]) so a single grep follows one flow.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from lotmanager.config import settings

LOG_LEVEL = settings.LOG_LEVEL.upper()
LOG_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "logs")
LOG_FILE = os.path.join(LOG_DIR, "lotmanager.log")
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

os.makedirs(LOG_DIR, exist_ok=True)

_configured = False


def _handlers():
    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console = logging.StreamHandler()
    # 5 MB per file, the last 10 kept
    rotating = RotatingFileHandler(LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=10, encoding="utf-8")

    for handler in (console, rotating):
        handler.setLevel(LOG_LEVEL)
        handler.setFormatter(fmt)
    return console, rotating


def _configure_root_logger():
    global _configured
    if _configured:
        return
    _configured = True

    root = logging.getLogger()
    root.setLevel(LOG_LEVEL)
    for handler in _handlers():
        root.addHandler(handler)

    # SQL echo stays opt-in through the engine, not the root level
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Named logger for a lotmanager module; configures the root on first use."""
    _configure_root_logger()
    return logging.getLogger(name)
