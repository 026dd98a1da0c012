"""Unit tests for logging setup."""

import json
import logging

import pytest
from rich.logging import RichHandler

from mcpkit.core import lib_logger
from mcpkit.core.config import McpKitConfig
from mcpkit.core.lib_logger import LoggingManager, McpKitLoggerAdapter, StructuredFormatter


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level after the test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    manager = lib_logger._logging_manager
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
    lib_logger._logging_manager = manager


def make_record(msg: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord("mcpkit.test", logging.INFO, __file__, 10, msg, None, None, func="fn")
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    """Test JSON log formatting."""

    def test_format_basic_fields(self):
        """Test the standard fields."""
        entry = json.loads(StructuredFormatter().format(make_record()))

        assert entry["level"] == "INFO"
        assert entry["logger"] == "mcpkit.test"
        assert entry["message"] == "hello"
        assert entry["function"] == "fn"
        assert entry["line"] == 10
        assert "timestamp" in entry

    def test_extra_fields_included(self):
        """Test that extra context is merged into the entry."""
        entry = json.loads(StructuredFormatter().format(make_record(component="server", request_id=3)))
        assert entry["component"] == "server"
        assert entry["request_id"] == 3

    def test_include_fields_filter(self):
        """Test restricting the output fields."""
        entry = json.loads(StructuredFormatter(include_fields=["level", "message"]).format(make_record()))
        assert entry == {"level": "INFO", "message": "hello"}

    def test_exception_info(self):
        """Test that tracebacks are included."""
        try:
            raise ValueError("boom")
        except ValueError:
            import sys
            record = make_record()
            record.exc_info = sys.exc_info()

        entry = json.loads(StructuredFormatter().format(record))
        assert "ValueError: boom" in entry["exception"]


class TestLoggerAdapter:
    """Test context-carrying logger adapter."""

    def test_with_context_merges(self):
        """Test that context accumulates without mutating the parent."""
        adapter = McpKitLoggerAdapter(logging.getLogger("mcpkit.test"), {"component": "server"})
        child = adapter.with_context(session="abc")

        assert child.extra == {"component": "server", "session": "abc"}
        assert adapter.extra == {"component": "server"}

    def test_process_adds_extra(self):
        """Test that call-site extra is kept alongside adapter context."""
        adapter = McpKitLoggerAdapter(logging.getLogger("mcpkit.test"), {"component": "cli"})
        _, kwargs = adapter.process("msg", {"extra": {"target": "x"}})
        assert kwargs["extra"] == {"target": "x", "component": "cli"}


class TestLoggingManager:
    """Test handler installation."""

    def test_console_handler_on_stderr(self, restore_root_logger):
        """Test that logging goes to a RichHandler bound to stderr."""
        manager = LoggingManager(McpKitConfig(log_level="INFO"))
        manager.setup_logging()

        handlers = restore_root_logger.handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], RichHandler)
        assert manager.console.stderr is True
        assert restore_root_logger.level == logging.INFO
        assert logging.getLogger("asyncio").level == logging.WARNING

    def test_debug_forces_debug_level(self, restore_root_logger):
        """Test the debug switch."""
        LoggingManager(McpKitConfig(debug=True, log_level="ERROR")).setup_logging()
        assert restore_root_logger.level == logging.DEBUG

    def test_file_handler_writes_json(self, restore_root_logger, tmp_path):
        """Test that log_file adds a structured file handler."""
        log_file = tmp_path / "logs" / "mcpkit.log"
        manager = LoggingManager(McpKitConfig(log_level="INFO", log_file=log_file))
        manager.setup_logging()

        logger = manager.get_component_logger("server", server="test")
        logger.info("started")
        for handler in restore_root_logger.handlers:
            handler.flush()

        entry = json.loads(log_file.read_text(encoding="utf-8").strip().splitlines()[-1])
        assert entry["message"] == "started"
        assert entry["logger"] == "mcpkit.server"
        assert entry["component"] == "server"
        assert entry["server"] == "test"

    def test_setup_is_idempotent(self, restore_root_logger):
        """Test that repeated setup does not stack handlers."""
        manager = LoggingManager(McpKitConfig())
        manager.setup_logging()
        manager.setup_logging()
        assert len(restore_root_logger.handlers) == 1

    def test_module_level_setup(self, restore_root_logger):
        """Test the process-wide helpers."""
        manager = lib_logger.setup_logging(McpKitConfig(log_level="DEBUG"))

        assert lib_logger._logging_manager is manager
        adapter = lib_logger.get_component_logger("cli")
        assert adapter.logger.name == "mcpkit.cli"
        assert adapter.extra == {"component": "cli"}
