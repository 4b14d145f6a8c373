# tests/test_logging_config.py

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from medicine_tracker_api.app.core.logging_config import (
    CONSOLE_HANDLER_NAME,
    FILE_HANDLER_NAME,
    setup_logging,
)


@pytest.fixture()
def root_logger():
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler.get_name() in (CONSOLE_HANDLER_NAME, FILE_HANDLER_NAME) and handler not in before:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def _named(root: logging.Logger, name: str) -> list[logging.Handler]:
    return [h for h in root.handlers if h.get_name() == name]


def test_repeated_setup_does_not_stack_handlers(root_logger, tmp_path: Path) -> None:
    logfile = tmp_path / "logs" / "api.log"

    setup_logging("INFO", str(logfile))
    setup_logging("DEBUG", str(logfile))

    assert len(_named(root_logger, CONSOLE_HANDLER_NAME)) == 1
    file_handlers = _named(root_logger, FILE_HANDLER_NAME)
    assert len(file_handlers) == 1
    assert isinstance(file_handlers[0], RotatingFileHandler)
    assert root_logger.level == logging.DEBUG


def test_file_handler_writes_and_rotates(root_logger, tmp_path: Path) -> None:
    logfile = tmp_path / "api.log"

    setup_logging("INFO", str(logfile), max_bytes=200, backup_count=2)
    log = logging.getLogger("medicine_tracker_api.tests")
    for i in range(20):
        log.info("medicine %s stored", i)
    for handler in _named(root_logger, FILE_HANDLER_NAME):
        handler.flush()

    assert logfile.exists()
    assert "[INFO] medicine_tracker_api.tests: medicine 19 stored" in logfile.read_text()
    assert (tmp_path / "api.log.1").exists()
    assert not (tmp_path / "api.log.3").exists()


def test_unknown_level_falls_back_to_info(root_logger) -> None:
    setup_logging("chatty")
    assert root_logger.level == logging.INFO
