"""Tests for root logger configuration."""

from __future__ import annotations

import logging

import pytest

from src.logging_setup import LOG_FORMAT, configure_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def _installed(root: logging.Logger):
    return [handler for handler in root.handlers if getattr(handler, "_atomica_handler", False)]


def test_sets_level_from_name(restore_root_logger):
    root = configure_logging("debug")
    assert root is restore_root_logger
    assert root.level == logging.DEBUG
    assert _installed(root)[0].formatter._fmt == LOG_FORMAT


def test_repeated_calls_do_not_stack_handlers(restore_root_logger):
    configure_logging("INFO")
    configure_logging(logging.WARNING)
    assert len(_installed(restore_root_logger)) == 1
    assert restore_root_logger.level == logging.WARNING


def test_log_file_receives_records(restore_root_logger, tmp_path):
    log_path = tmp_path / "atomica.log"
    configure_logging("INFO", log_file=log_path)
    assert len(_installed(restore_root_logger)) == 2

    logging.getLogger("src.nuclear").info("fusion released energy")
    for handler in _installed(restore_root_logger):
        handler.flush()

    content = log_path.read_text(encoding="utf-8")
    assert "INFO - src.nuclear - fusion released energy" in content


def test_unknown_level_is_rejected(restore_root_logger):
    with pytest.raises(ValueError):
        configure_logging("LOUD")
