"""Tests for logging setup."""

import logging

import pytest
from loguru import logger

from verifybot.core.logger import InterceptHandler, setup_structured_logging


@pytest.fixture
def restore_logging():
    yield
    logger.remove()
    logging.basicConfig(handlers=[], force=True)


class TestStructuredLogging:
    """Tests for setup_structured_logging."""

    def test_json_file_sink(self, tmp_path, restore_logging):
        setup_structured_logging("INFO", json_format=True, logs_dir=tmp_path)
        logger.info("hello json")
        logger.complete()

        log_file = tmp_path / "verifybot.jsonl"
        assert log_file.exists()
        assert "hello json" in log_file.read_text()

    def test_text_file_sink(self, tmp_path, restore_logging):
        setup_structured_logging("info", json_format=False, logs_dir=tmp_path)
        logger.warning("hello text")

        assert "hello text" in (tmp_path / "verifybot.log").read_text()

    def test_stdlib_logging_is_intercepted(self, tmp_path, restore_logging):
        setup_structured_logging("INFO", json_format=False, logs_dir=tmp_path)

        assert any(isinstance(h, InterceptHandler) for h in logging.getLogger().handlers)
        logging.getLogger("telegram.ext.Application").warning("from stdlib")

        assert "from stdlib" in (tmp_path / "verifybot.log").read_text()

    def test_noisy_loggers_quieted(self, tmp_path, restore_logging):
        setup_structured_logging("INFO", json_format=False, logs_dir=tmp_path)

        assert logging.getLogger("httpx").level == logging.WARNING
