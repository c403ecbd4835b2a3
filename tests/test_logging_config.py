"""Tests for exercise_extraction.logging_config."""

import logging

import pytest

from exercise_extraction.logging_config import LOGGER_NAME, get_logger, resolve_level, setup_logging


@pytest.fixture
def restore_logger():
    logger = logging.getLogger(LOGGER_NAME)
    level = logger.level
    handlers = list(logger.handlers)
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers = handlers
    logger.setLevel(level)


class TestSetupLogging:
    def test_console_handler(self, restore_logger):
        logger = setup_logging(logging.DEBUG)
        assert logger.name == LOGGER_NAME
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_no_duplicate_handlers(self, restore_logger):
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_level_by_name(self, restore_logger):
        assert setup_logging("warning").level == logging.WARNING

    def test_file_handler(self, restore_logger, tmp_path):
        log_file = tmp_path / "logs" / "extraction.log"
        logger = setup_logging(log_file=log_file)
        logger.info("written to file")
        for handler in logger.handlers:
            handler.flush()
        assert "written to file" in log_file.read_text(encoding="utf-8")


class TestGetLogger:
    def test_prefixed(self):
        assert get_logger("service").name == "exercise_extraction.service"

    def test_module_name_kept(self):
        assert get_logger("exercise_extraction.coordinator").name == "exercise_extraction.coordinator"


class TestResolveLevel:
    def test_number_kept(self):
        assert resolve_level(logging.WARNING) == logging.WARNING

    def test_name_case_insensitive(self):
        assert resolve_level(" debug ") == logging.DEBUG

    def test_unknown_name(self):
        with pytest.raises(ValueError):
            resolve_level("chatty")
