#!/usr/bin/env python3
"""Tests for the Logger module."""

import logging
import logging.handlers
import tempfile
import threading
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from tagr.infrastructure.logger import Logger, LogLevel


@pytest.fixture
def logger_with_mock_handler():
    """Create logger with mock handler."""
    logger = Logger(name="tagr.test", level=LogLevel.DEBUG)
    mock_handler = MagicMock(spec=logging.Handler)
    mock_handler.level = logging.DEBUG
    logger.logger.handlers.clear()
    logger.logger.addHandler(mock_handler)
    return logger, mock_handler


class TestLogLevel:
    """Tests for LogLevel enum."""

    def test_log_levels(self):
        """Test log level values match Python logging."""
        assert LogLevel.DEBUG == logging.DEBUG
        assert LogLevel.INFO == logging.INFO
        assert LogLevel.WARNING == logging.WARNING
        assert LogLevel.ERROR == logging.ERROR
        assert LogLevel.CRITICAL == logging.CRITICAL

    def test_log_level_ordering(self):
        assert LogLevel.DEBUG < LogLevel.INFO < LogLevel.WARNING < LogLevel.ERROR


class TestLogger:
    """Tests for Logger class."""

    def test_logger_creation(self):
        logger = Logger(name="tagr.test", level=LogLevel.DEBUG)
        assert logger.name == "tagr.test"
        assert logger.get_level() == LogLevel.DEBUG

    def test_default_name(self):
        assert Logger().name == "tagr"

    def test_logger_with_string_level(self):
        logger = Logger(name="tagr.test", level="warning")
        assert logger.get_level() == LogLevel.WARNING

    def test_logger_with_custom_handlers(self):
        handler = logging.StreamHandler()
        logger = Logger(name="tagr.test", handlers=[handler])
        assert logger.logger.handlers == [handler]

    def test_recreating_logger_replaces_handlers(self):
        """Creating a Logger twice with one name does not stack handlers."""
        Logger(name="tagr.test")
        logger = Logger(name="tagr.test")
        assert len(logger.logger.handlers) == 1

    def test_add_and_remove_handler(self):
        logger = Logger(name="tagr.test")
        handler = logging.StreamHandler()
        logger.add_handler(handler)
        assert handler in logger.logger.handlers
        logger.remove_handler(handler)
        assert handler not in logger.logger.handlers

    def test_create_file_handler(self):
        logger = Logger(name="tagr.test")
        with tempfile.TemporaryDirectory() as tmpdir:
            handler = logger.create_file_handler(
                Path(tmpdir) / "tagr.log", max_bytes=1000, backup_count=3
            )
            try:
                assert isinstance(handler, logging.handlers.RotatingFileHandler)
                assert handler.maxBytes == 1000
                assert handler.backupCount == 3
            finally:
                handler.close()

    def test_is_enabled_for(self):
        logger = Logger(name="tagr.test", level=LogLevel.INFO)
        assert not logger.is_enabled_for(LogLevel.DEBUG)
        assert logger.is_enabled_for("INFO")
        assert logger.is_enabled_for(LogLevel.ERROR)

    def test_propagation_disabled(self):
        assert Logger(name="tagr.test.child").logger.propagate is False

    def test_invalid_level_string(self):
        logger = Logger(name="tagr.test")
        with pytest.raises(KeyError):
            logger.set_level("LOUD")


class TestLoggingMethods:
    """Tests for logging methods."""

    def test_debug_logging(self, logger_with_mock_handler):
        logger, mock_handler = logger_with_mock_handler
        logger.debug("Metadata fetched", path="/tmp/a.txt")
        mock_handler.handle.assert_called_once()
        record = mock_handler.handle.call_args[0][0]
        assert record.getMessage() == "Metadata fetched | path=/tmp/a.txt"

    def test_info_logging(self, logger_with_mock_handler):
        logger, mock_handler = logger_with_mock_handler
        logger.info("Built pattern queries", tags=2)
        record = mock_handler.handle.call_args[0][0]
        assert "tags=2" in record.getMessage()
        assert record.levelno == logging.INFO

    def test_warning_and_error_logging(self, logger_with_mock_handler):
        logger, mock_handler = logger_with_mock_handler
        logger.warning("Slow stat", seconds=3)
        logger.error("Stat failed", errno=2)
        assert mock_handler.handle.call_count == 2
        messages = [c[0][0].getMessage() for c in mock_handler.handle.call_args_list]
        assert messages == ["Slow stat | seconds=3", "Stat failed | errno=2"]

    def test_exception_logging(self, logger_with_mock_handler):
        logger, mock_handler = logger_with_mock_handler
        logger.exception("Evaluation failed", ValueError("bad"), tag="size:>1MB")
        record = mock_handler.handle.call_args[0][0]
        message = record.getMessage()
        assert "exception_type=ValueError" in message
        assert "exception_message=bad" in message
        assert "tag=size:>1MB" in message

    def test_logging_disabled_level(self, logger_with_mock_handler):
        logger, mock_handler = logger_with_mock_handler
        logger.set_level(LogLevel.WARNING)
        logger.debug("hidden")
        logger.info("hidden")
        mock_handler.handle.assert_not_called()

    def test_logging_without_context(self, logger_with_mock_handler):
        logger, mock_handler = logger_with_mock_handler
        logger.info("Plain message")
        record = mock_handler.handle.call_args[0][0]
        assert record.getMessage() == "Plain message"

    def test_context_attached_to_record(self, logger_with_mock_handler):
        logger, mock_handler = logger_with_mock_handler
        logger.info("With extra", key="value")
        record = mock_handler.handle.call_args[0][0]
        assert record.context == {"key": "value"}


class TestContextManager:
    """Tests for context manager functionality."""

    def test_nested_context(self, logger_with_mock_handler):
        logger, mock_handler = logger_with_mock_handler
        with logger.add_context(outer="1"):
            with logger.add_context(inner="2"):
                logger.info("Nested")
        message = mock_handler.handle.call_args[0][0].getMessage()
        assert "outer=1" in message
        assert "inner=2" in message

    def test_context_cleanup_after_exception(self):
        logger = Logger(name="tagr.test")
        with pytest.raises(ValueError):
            with logger.add_context(vtag="perm:executable"):
                raise ValueError("boom")
        assert "vtag" not in logger._get_context()

    def test_later_context_overrides_earlier(self):
        logger = Logger(name="tagr.test")
        logger._context_stack.stack = [{"a": 1}, {"b": 2}, {"a": 3}]
        try:
            assert logger._get_context() == {"a": 3, "b": 2}
        finally:
            logger._context_stack.stack = [{}]

    def test_thread_local_context(self):
        logger = Logger(name="tagr.test")
        results = []

        def thread_func(value):
            with logger.add_context(worker=value):
                results.append(logger._get_context().get("worker"))

        threads = [threading.Thread(target=thread_func, args=(i,)) for i in range(3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(results) == [0, 1, 2]
