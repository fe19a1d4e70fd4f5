"""
Logging setup for sws-blog.

Everything goes to the console. When file logging is enabled, the full DEBUG
stream is also written to ``sws_blog.log`` and live chat activity (visitor
conversations, typing, notifications) is copied to ``live_chat.log`` so the
inbox can be audited without the request noise.

Settings come from ``LoggingConfig`` (``SWS_BLOG_LOG_LEVEL``, ``LOG_FORMAT``,
``LOG_FILE_DIR``, ``ENABLE_FILE_LOGGING``).
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional

if TYPE_CHECKING:
    from sws_blog.server.core.config import LoggingConfig

APP_LOG_FILE = "sws_blog.log"
LIVE_CHAT_LOG_FILE = "live_chat.log"

SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"
DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LIVE_CHAT_LOGGERS = (
    "sws_blog.server.api.v1.live_chat",
    "sws_blog.server.api.v1.admin_live_chat",
    "sws_blog.server.services.live_chat",
    "sws_blog.server.services.typing_tracker",
    "sws_blog.server.services.notification",
)

MODULE_LOG_LEVELS = {
    "sws_blog.server.services": "DEBUG",
    "sqlalchemy": "WARNING",
    "httpx": "WARNING",
    "httpcore": "WARNING",
    "asyncio": "WARNING",
    "sse_starlette": "WARNING",
}

# Attributes every LogRecord has; anything else came in through ``extra=``.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per line, including any ``extra=`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.filename}:{record.lineno}",
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class LoggerPrefixFilter(logging.Filter):
    """Pass records whose logger name falls under one of ``prefixes``."""

    def __init__(self, prefixes: Iterable[str]) -> None:
        super().__init__()
        self.prefixes = tuple(prefixes)

    def filter(self, record: logging.LogRecord) -> bool:
        return record.name.startswith(self.prefixes)


def build_formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return JsonFormatter()
    if log_format == "simple":
        return logging.Formatter(SIMPLE_FORMAT)
    return logging.Formatter(DETAILED_FORMAT, datefmt=DATE_FORMAT)


def _file_handler(path: Path, formatter: logging.Formatter) -> logging.FileHandler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: bool = True,
    config: Optional[LoggingConfig] = None,
) -> None:
    """
    Configure the root logger.

    Args:
        log_level: console level override (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: format override (simple, detailed, json)
        enable_file: allow file handlers; they are only added when the config enables them too
        config: log settings, read from the application settings when omitted
    """
    if config is None:
        from sws_blog.server.core.config import settings

        config = settings.logging

    level = (log_level or config.level).upper()
    fmt = log_format or config.format
    formatter = build_formatter(fmt)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    file_logging = enable_file and config.file_enabled
    if file_logging:
        log_dir = Path(config.file_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        root_logger.addHandler(_file_handler(log_dir / APP_LOG_FILE, formatter))
        chat_handler = _file_handler(log_dir / LIVE_CHAT_LOG_FILE, formatter)
        chat_handler.addFilter(LoggerPrefixFilter(LIVE_CHAT_LOGGERS))
        root_logger.addHandler(chat_handler)

    for module_name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(module_name).setLevel(module_level)

    root_logger.info(f"Logging configured: level={level}, format={fmt}, file_logging={file_logging}")


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
