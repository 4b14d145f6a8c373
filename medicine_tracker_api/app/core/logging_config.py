"""
Logging configuration for the Medicine Tracker API.

``setup_logging`` installs two named handlers on the root logger: a
console handler and, when ``LOG_FILE`` is set, a size-rotated file
handler.  Handlers are found again by name, so calling the function
twice (``create_app`` in tests, uvicorn reloads) adjusts levels without
stacking duplicates, and handlers added by other tools are left alone.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

CONSOLE_HANDLER_NAME = "medicine-tracker-console"
FILE_HANDLER_NAME = "medicine-tracker-file"


def _find_handler(logger: logging.Logger, name: str) -> Optional[logging.Handler]:
    for handler in logger.handlers:
        if handler.get_name() == name:
            return handler
    return None


def setup_logging(
    level: str = "INFO",
    logfile: Optional[str] = None,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
) -> None:
    """Configure the root logger for the service.

    Parameters
    ----------
    level : str
        Logging level name, case insensitive.  Unknown names fall back
        to ``INFO``.  Re-applied on every call.
    logfile : Optional[str]
        File to write to in addition to the console.  Rotated once it
        reaches ``max_bytes``, keeping ``backup_count`` old files.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    if _find_handler(root, CONSOLE_HANDLER_NAME) is None:
        console_handler = logging.StreamHandler()
        console_handler.set_name(CONSOLE_HANDLER_NAME)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    if logfile and _find_handler(root, FILE_HANDLER_NAME) is None:
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
        file_handler.set_name(FILE_HANDLER_NAME)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
