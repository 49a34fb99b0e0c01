"""Tests for logging setup."""

import sys

import pytest
from loguru import logger

from sprig.logging_utils import configure_logging, level_filter


@pytest.fixture(autouse=True)
def restore_logger():
    """Put loguru's default handler back after each test."""
    yield
    logger.remove()
    logger.add(sys.stderr)


def _log_as(module_name: str, level: str, message: str) -> None:
    logger.patch(lambda record: record.update(name=module_name)).log(level, message)


class TestLevelFilter:
    """Test per-module thresholds."""

    def test_container_follows_application_level_by_default(self):
        assert level_filter("INFO") == {"": "INFO", "sprig": "INFO"}

    def test_separate_container_level(self):
        assert level_filter("WARNING", "DEBUG") == {"": "WARNING", "sprig": "DEBUG"}


class TestConfigureLogging:
    """Test the stderr handler."""

    def test_application_level(self, capsys):
        configure_logging("WARNING")

        _log_as("myapp.main", "INFO", "app info")
        _log_as("myapp.main", "WARNING", "app warning")

        err = capsys.readouterr().err
        assert "app info" not in err
        assert "app warning" in err

    def test_container_level_traces_only_the_container(self, capsys):
        configure_logging("WARNING", container_level="DEBUG")

        _log_as("sprig.context", "DEBUG", "container debug")
        _log_as("myapp.main", "DEBUG", "app debug")

        err = capsys.readouterr().err
        assert "container debug" in err
        assert "app debug" not in err

    def test_returns_handler_id(self):
        handler_id = configure_logging()

        logger.remove(handler_id)
