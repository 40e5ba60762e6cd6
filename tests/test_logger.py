"""Unit tests for core.logger."""

import logging

import pytest

from trader_sync.core.logger import setup_logging


@pytest.fixture
def reset_logger():
    yield
    log = logging.getLogger("trader_sync")
    for handler in list(log.handlers):
        log.removeHandler(handler)
        handler.close()
    log.setLevel(logging.NOTSET)


def test_file_handler_and_level(tmp_path, reset_logger):
    log = setup_logging("debug", tmp_path / "logs", "sync.log")
    assert log.level == logging.DEBUG
    logging.getLogger("trader_sync.cache").debug("Cache miss, loading: %s", "/status")
    for handler in log.handlers:
        handler.flush()
    text = (tmp_path / "logs" / "sync.log").read_text(encoding="utf-8")
    assert "| DEBUG    | trader_sync.cache | Cache miss, loading: /status" in text


def test_secrets_are_masked(tmp_path, reset_logger):
    log = setup_logging("INFO", tmp_path, "sync.log", secrets=("k-123", ""))
    logging.getLogger("trader_sync.transport").info("Sending key %s", "k-123")
    for handler in log.handlers:
        handler.flush()
    text = (tmp_path / "sync.log").read_text(encoding="utf-8")
    assert "k-123" not in text
    assert "Sending key ***" in text


def test_repeated_setup_replaces_handlers(tmp_path, reset_logger):
    setup_logging("INFO", tmp_path, "a.log")
    log = setup_logging("INFO")
    assert len(log.handlers) == 1
