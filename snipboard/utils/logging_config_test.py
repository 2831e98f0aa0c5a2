import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from .logging_config import setup_logging


@pytest.fixture
def bare_root_logger():
    """Detach root handlers for the test and restore them afterwards."""
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    root.handlers.clear()
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


def test_setup_logging_adds_console_and_file(bare_root_logger, tmp_path: Path):
    setup_logging(log_file_prefix="unit", log_dir=tmp_path)

    [file_handler] = [
        h for h in bare_root_logger.handlers if isinstance(h, RotatingFileHandler)
    ]
    assert file_handler.level == logging.INFO
    assert file_handler.backupCount == 4
    assert len(bare_root_logger.handlers) == 2
    assert (tmp_path / "unit.log").exists()


def test_setup_logging_keeps_existing_handlers(bare_root_logger, tmp_path: Path):
    existing = logging.NullHandler()
    bare_root_logger.addHandler(existing)

    setup_logging(log_dir=tmp_path)

    assert bare_root_logger.handlers == [existing]
    assert not (tmp_path / "snipboard.log").exists()
