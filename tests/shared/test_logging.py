"""Tests for logging configuration."""

import logging

import pytest
import structlog
from shared.config import Settings
from shared.logging import configure_logging


@pytest.fixture()
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            handler.close()
            root.removeHandler(handler)
    root.setLevel(level)
    structlog.reset_defaults()


def test_log_dir_is_read_from_the_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("STOREFRONT_LOG_DIR", str(tmp_path / "logs"))

    assert Settings().log_dir == tmp_path / "logs"


@pytest.mark.usefixtures("restore_root_logger")
def test_console_only_without_log_dir():
    configure_logging("test")

    assert [type(handler) for handler in logging.getLogger().handlers] == [logging.StreamHandler]


@pytest.mark.usefixtures("restore_root_logger")
def test_rotating_files_are_written_to_log_dir(tmp_path):
    log_dir = tmp_path / "logs"
    configure_logging("production", log_dir)

    logger = logging.getLogger("storefront.checkout")
    logger.info("Order placed")
    logger.error("Stock update failed")

    assert "Order placed" in (log_dir / "storefront.log").read_text()
    errors = (log_dir / "storefront_error.log").read_text()
    assert "Stock update failed" in errors
    assert "Order placed" not in errors
