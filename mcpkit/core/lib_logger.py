"""Structured logging configuration for mcpkit.

Console output always goes to stderr: stdout carries the protocol stream.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from rich.console import Console
from rich.logging import RichHandler

from .config import McpKitConfig

_RESERVED_RECORD_FIELDS = frozenset([
    "name", "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "lineno", "funcName", "created",
    "msecs", "relativeCreated", "thread", "threadName",
    "processName", "process", "getMessage", "exc_info",
    "exc_text", "stack_info", "taskName", "message",
])


class StructuredFormatter(logging.Formatter):
    """Custom formatter that outputs structured JSON logs."""

    def __init__(self, include_fields: Optional[list] = None):
        """Initialize with optional field filtering."""
        super().__init__()
        self.include_fields = include_fields

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON."""
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        # Extra fields passed through `extra=` or a logger adapter
        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_FIELDS:
                log_entry[key] = value

        if self.include_fields:
            log_entry = {k: v for k, v in log_entry.items() if k in self.include_fields}

        return json.dumps(log_entry, default=str)


class McpKitLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that carries connection or component context."""

    def __init__(self, logger: logging.Logger, extra: Dict[str, Any]):
        super().__init__(logger, extra)

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        """Merge adapter context into the record's extra fields."""
        extra = dict(kwargs.get("extra") or {})
        extra.update(self.extra)
        kwargs["extra"] = extra
        return msg, kwargs

    def with_context(self, **context) -> "McpKitLoggerAdapter":
        """Create new adapter with additional context."""
        new_extra = dict(self.extra)
        new_extra.update(context)
        return McpKitLoggerAdapter(self.logger, new_extra)


class LoggingManager:
    """Manage logging configuration for an mcpkit process."""

    def __init__(self, config: McpKitConfig):
        """Initialize logging manager with configuration."""
        self.config = config
        self.console = Console(stderr=True)
        self._configured = False

    def setup_logging(self) -> None:
        """Set up logging configuration based on settings."""
        if self._configured:
            return

        level = "DEBUG" if self.config.debug else self.config.log_level

        root_logger = logging.getLogger()
        root_logger.setLevel(level)

        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        console_handler = RichHandler(
            console=self.console,
            show_time=True,
            show_path=self.config.debug,
            rich_tracebacks=True,
            tracebacks_show_locals=self.config.debug
        )
        console_handler.setLevel(level)
        root_logger.addHandler(console_handler)

        if self.config.log_file:
            self.config.log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(self.config.log_file, mode="a", encoding="utf-8")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(StructuredFormatter())
            root_logger.addHandler(file_handler)

        self._configure_third_party_logging()

        self._configured = True

    def _configure_third_party_logging(self) -> None:
        """Reduce noise from libraries."""
        library_loggers = {
            "asyncio": logging.WARNING,
        }

        for logger_name, level in library_loggers.items():
            logging.getLogger(logger_name).setLevel(level)

    def get_logger(self, name: str, **context) -> McpKitLoggerAdapter:
        """Get a logger with mcpkit-specific context."""
        if not self._configured:
            self.setup_logging()

        return McpKitLoggerAdapter(logging.getLogger(name), context)

    def get_component_logger(self, component: str, **context) -> McpKitLoggerAdapter:
        """Get a logger for a specific mcpkit component."""
        context["component"] = component
        return self.get_logger(f"mcpkit.{component}", **context)


# Process-wide logging manager; logging handlers are process-global anyway
_logging_manager: Optional[LoggingManager] = None


def setup_logging(config: McpKitConfig) -> LoggingManager:
    """Set up global logging configuration."""
    global _logging_manager
    _logging_manager = LoggingManager(config)
    _logging_manager.setup_logging()
    return _logging_manager


def get_logger(name: str, **context) -> McpKitLoggerAdapter:
    """Get a logger instance, configuring defaults on first use."""
    if _logging_manager is None:
        setup_logging(McpKitConfig())

    return _logging_manager.get_logger(name, **context)


def get_component_logger(component: str, **context) -> McpKitLoggerAdapter:
    """Get a component-specific logger."""
    if _logging_manager is None:
        setup_logging(McpKitConfig())

    return _logging_manager.get_component_logger(component, **context)
