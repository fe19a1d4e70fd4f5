"""
Unit tests for the Logfire monitoring module.

This test suite covers:
- Environment variable parsing
- Disabled / missing-token initialization paths
- Instrumentation when enabled
- The event helpers never raising
"""

import importlib
import os
from unittest.mock import MagicMock, patch

import pytest

import sws_blog.core.monitoring as monitoring


@pytest.fixture
def reload_monitoring():
    """Reload the module under a patched environment, then restore it."""
    yield lambda: importlib.reload(monitoring)
    importlib.reload(monitoring)


class TestLogfireEnvironmentConfiguration:
    def test_logfire_disabled_by_default(self, reload_monitoring):
        with patch.dict(os.environ, {}, clear=True):
            module = reload_monitoring()

        assert module.LOGFIRE_ENABLED is False
        assert module.LOGFIRE_PROJECT_NAME == "sws-blog"

    @pytest.mark.parametrize("value", ["true", "1", "yes", "TRUE"])
    def test_logfire_enabled_values(self, reload_monitoring, value):
        with patch.dict(os.environ, {"LOGFIRE_ENABLED": value}):
            module = reload_monitoring()

        assert module.LOGFIRE_ENABLED is True

    def test_feature_flags_can_be_turned_off(self, reload_monitoring):
        with patch.dict(os.environ, {"LOGFIRE_TRACE_HTTPX": "false", "LOGFIRE_TRACE_FASTAPI": "0"}):
            module = reload_monitoring()

        assert module.LOGFIRE_TRACE_HTTPX is False
        assert module.LOGFIRE_TRACE_FASTAPI is False
        assert module.LOGFIRE_TRACE_SQLALCHEMY is True


class TestInitializeLogfire:
    def test_disabled_is_a_logged_noop(self):
        fake_logfire = MagicMock()
        with patch.object(monitoring, "LOGFIRE_ENABLED", False), patch.dict(
            "sys.modules", {"logfire": fake_logfire}
        ), patch.object(monitoring, "logger") as mock_logger:
            monitoring.initialize_logfire()

        fake_logfire.configure.assert_not_called()
        mock_logger.info.assert_called_once()

    def test_enabled_without_token_warns(self):
        fake_logfire = MagicMock()
        with patch.object(monitoring, "LOGFIRE_ENABLED", True), patch.object(
            monitoring, "LOGFIRE_TOKEN", ""
        ), patch.dict("sys.modules", {"logfire": fake_logfire}), patch.object(monitoring, "logger") as mock_logger:
            monitoring.initialize_logfire()

        fake_logfire.configure.assert_not_called()
        mock_logger.warning.assert_called_once()

    def test_enabled_configures_and_instruments(self):
        fake_logfire = MagicMock()
        app = MagicMock()
        with patch.object(monitoring, "LOGFIRE_ENABLED", True), patch.object(
            monitoring, "LOGFIRE_TOKEN", "token"
        ), patch.dict("sys.modules", {"logfire": fake_logfire}):
            monitoring.initialize_logfire(app)

        fake_logfire.configure.assert_called_once()
        assert fake_logfire.configure.call_args.kwargs["token"] == "token"
        fake_logfire.instrument_pydantic_ai.assert_called_once()
        fake_logfire.instrument_sqlalchemy.assert_called_once()
        fake_logfire.instrument_httpx.assert_called_once()
        fake_logfire.instrument_fastapi.assert_called_once_with(app=app)

    def test_instrumentation_failure_is_tolerated(self):
        fake_logfire = MagicMock()
        fake_logfire.instrument_httpx.side_effect = RuntimeError("missing extra")
        with patch.object(monitoring, "LOGFIRE_ENABLED", True), patch.object(
            monitoring, "LOGFIRE_TOKEN", "token"
        ), patch.dict("sys.modules", {"logfire": fake_logfire}):
            monitoring.initialize_logfire()

        fake_logfire.instrument_sqlalchemy.assert_called_once()
        fake_logfire.instrument_fastapi.assert_not_called()


class TestEventHelpers:
    def test_log_chat_event_forwards_attributes(self):
        fake_logfire = MagicMock()
        with patch.dict("sys.modules", {"logfire": fake_logfire}):
            monitoring.log_chat_event("started", "conv-1", post_id="post-1")

        fake_logfire.info.assert_called_once_with(
            "Live chat event", chat_event="started", conversation_id="conv-1", post_id="post-1"
        )

    def test_log_llm_call_reports_usage(self):
        fake_logfire = MagicMock()
        with patch.dict("sys.modules", {"logfire": fake_logfire}):
            monitoring.log_llm_call("openai:gpt-4o", 321, succeeded=False)

        fake_logfire.info.assert_called_once_with(
            "LLM call completed", model="openai:gpt-4o", tokens_used=321, succeeded=False
        )

    @pytest.mark.parametrize(
        "call",
        [
            lambda: monitoring.log_api_request("GET", "/health", 200, 1.5),
            lambda: monitoring.log_llm_call("m", 1),
            lambda: monitoring.log_chat_event("closed", "c"),
            lambda: monitoring.log_error("ValueError", "boom", {"path": "/x"}),
        ],
    )
    def test_helpers_never_raise(self, call):
        fake_logfire = MagicMock()
        fake_logfire.info.side_effect = RuntimeError("down")
        fake_logfire.error.side_effect = RuntimeError("down")
        with patch.dict("sys.modules", {"logfire": fake_logfire}):
            call()
