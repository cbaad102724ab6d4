"""
Logging setup - console plus combined/error log files.
"""

from __future__ import annotations
from pathlib import Path
import logging

from .config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: Settings, console: bool = True) -> logging.Logger:
    """
    Install handlers on the root logger.

    combined.log gets everything at the configured level, error.log only
    errors. Safe to call more than once; earlier handlers are replaced.
    """
    directory = Path(settings.log_directory)
    directory.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(settings.log_level)

    formatter = logging.Formatter(LOG_FORMAT)

    combined = logging.FileHandler(directory / "combined.log", encoding="utf-8")
    combined.setFormatter(formatter)
    root.addHandler(combined)

    errors = logging.FileHandler(directory / "error.log", encoding="utf-8")
    errors.setLevel(logging.ERROR)
    errors.setFormatter(formatter)
    root.addHandler(errors)

    if console:
        stream = logging.StreamHandler()
        stream.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
        root.addHandler(stream)

    logger = logging.getLogger("slotwatch")
    logger.info("Logger initialized (level=%s, directory=%s)", settings.log_level, directory)
    return logger
