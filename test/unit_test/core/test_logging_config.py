"""Unit tests for logging configuration module.

Tests verify console levels, formats (including the JSON formatter), file
handlers and the live chat log routing.
"""

import json
import logging
import sys

import pytest

from sws_blog.core.logging_config import (
    DETAILED_FORMAT,
    LIVE_CHAT_LOG_FILE,
    LIVE_CHAT_LOGGERS,
    SIMPLE_FORMAT,
    JsonFormatter,
    LoggerPrefixFilter,
    build_formatter,
    get_logger,
    setup_logging,
)
from sws_blog.server.core.config import LoggingConfig


def _console_handler() -> logging.Handler:
    root_logger = logging.getLogger()
    handler = next(
        (h for h in root_logger.handlers if type(h) is logging.StreamHandler),
        None,
    )
    assert handler is not None
    return handler


def _record(name: str = "sws_blog.test", msg: str = "hello %s", args=("world",), **extra) -> logging.LogRecord:
    record = logging.LogRecord(name, logging.INFO, "/src/module.py", 42, msg, args, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def no_files() -> LoggingConfig:
    return LoggingConfig(file_enabled=False)


@pytest.fixture
def restore_logging():
    yield
    setup_logging(config=LoggingConfig(file_enabled=False))


class TestSetupLoggingLogLevels:
    """Test setup_logging with different log levels."""

    @pytest.mark.parametrize(
        "log_level,expected_level",
        [
            ("DEBUG", logging.DEBUG),
            ("INFO", logging.INFO),
            ("WARNING", logging.WARNING),
            ("error", logging.ERROR),
        ],
    )
    def test_setup_logging_with_different_levels(self, no_files, log_level, expected_level):
        setup_logging(log_level=log_level, config=no_files)

        assert _console_handler().level == expected_level

    def test_level_from_config(self):
        setup_logging(config=LoggingConfig(level="warning", file_enabled=False))

        assert _console_handler().level == logging.WARNING

    def test_repeated_setup_does_not_duplicate_handlers(self, no_files):
        setup_logging(config=no_files)
        setup_logging(config=no_files)

        assert len(logging.getLogger().handlers) == 1

    def test_settings_used_when_no_config_given(self):
        # the test environment disables file logging
        setup_logging()

        assert not any(isinstance(h, logging.FileHandler) for h in logging.getLogger().handlers)


class TestFormats:
    @pytest.mark.parametrize(
        "log_format,expected_format",
        [
            ("simple", SIMPLE_FORMAT),
            ("detailed", DETAILED_FORMAT),
            ("unknown", DETAILED_FORMAT),
        ],
    )
    def test_text_formats(self, log_format, expected_format):
        assert build_formatter(log_format)._fmt == expected_format

    def test_json_format_installs_json_formatter(self, no_files):
        setup_logging(log_format="json", config=no_files)

        assert isinstance(_console_handler().formatter, JsonFormatter)


class TestJsonFormatter:
    def test_renders_one_json_object(self):
        line = JsonFormatter().format(_record())

        payload = json.loads(line)
        assert payload["level"] == "INFO"
        assert payload["logger"] == "sws_blog.test"
        assert payload["message"] == "hello world"
        assert payload["location"] == "module.py:42"
        assert payload["timestamp"].endswith("+00:00")

    def test_extra_fields_are_included(self):
        payload = json.loads(JsonFormatter().format(_record(conversation_id="c1", duration_ms=12.5)))

        assert payload["conversation_id"] == "c1"
        assert payload["duration_ms"] == 12.5
        assert "args" not in payload
        assert "msg" not in payload

    def test_quotes_in_message_stay_valid_json(self):
        payload = json.loads(JsonFormatter().format(_record(msg='said "hi"', args=())))

        assert payload["message"] == 'said "hi"'

    def test_exception_is_rendered(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.LogRecord("x", logging.ERROR, "f.py", 1, "failed", (), sys.exc_info())

        payload = json.loads(JsonFormatter().format(record))
        assert "ValueError: boom" in payload["exception"]


class TestLiveChatRouting:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("sws_blog.server.services.live_chat", True),
            ("sws_blog.server.services.notification_center", True),
            ("sws_blog.server.services.notifications", True),
            ("sws_blog.server.api.v1.admin_live_chat", True),
            ("sws_blog.server.services.content_admin", False),
            ("sqlalchemy.engine", False),
        ],
    )
    def test_prefix_filter(self, name, expected):
        assert LoggerPrefixFilter(LIVE_CHAT_LOGGERS).filter(_record(name=name)) is expected

    def test_file_handlers_written_to_log_dir(self, tmp_path, restore_logging):
        setup_logging(config=LoggingConfig(file_dir=str(tmp_path), file_enabled=True))

        get_logger("sws_blog.server.services.live_chat").info("chat started")
        get_logger("sws_blog.server.services.content_admin").info("post saved")
        for handler in logging.getLogger().handlers:
            handler.flush()

        app_log = (tmp_path / "sws_blog.log").read_text()
        chat_log = (tmp_path / LIVE_CHAT_LOG_FILE).read_text()
        assert "chat started" in app_log
        assert "post saved" in app_log
        assert "chat started" in chat_log
        assert "post saved" not in chat_log

    def test_enable_file_false_wins_over_config(self, tmp_path):
        setup_logging(enable_file=False, config=LoggingConfig(file_dir=str(tmp_path), file_enabled=True))

        assert not any(isinstance(h, logging.FileHandler) for h in logging.getLogger().handlers)
        assert list(tmp_path.iterdir()) == []


class TestModuleLevels:
    def test_third_party_loggers_are_quieted(self, no_files):
        setup_logging(config=no_files)

        assert logging.getLogger("sqlalchemy").level == logging.WARNING
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_services_log_at_debug(self, no_files):
        setup_logging(config=no_files)

        assert logging.getLogger("sws_blog.server.services").level == logging.DEBUG


def test_get_logger_returns_named_logger():
    logger = get_logger("sws_blog.server.services.live_chat")

    assert logger is logging.getLogger("sws_blog.server.services.live_chat")
