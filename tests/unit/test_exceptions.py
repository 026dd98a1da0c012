"""Unit tests for the exception hierarchy."""

import pytest

from mcpkit.lib.exceptions import (
    AlreadyInitializedError,
    DuplicateNameError,
    HandlerTimeoutError,
    InvalidParamsError,
    McpKitError,
    MethodNotFoundError,
    NotInitializedError,
    ProtocolError,
    UnknownToolError,
    UnsupportedProtocolVersionError,
)


class TestProtocolErrors:
    """Test JSON-RPC error conversion."""

    @pytest.mark.parametrize(
        "error,code",
        [
            (NotInitializedError("tools/list"), -32002),
            (AlreadyInitializedError(), -32600),
            (MethodNotFoundError("x"), -32601),
            (InvalidParamsError("bad"), -32602),
            (UnknownToolError("x"), -32602),
            (UnsupportedProtocolVersionError("1.0", ["2025-06-18"]), -32602),
            (HandlerTimeoutError("prompt", "p", 1.0), -32000),
            (ProtocolError("generic"), -32603),
        ],
    )
    def test_codes(self, error, code):
        """Test the stable code of each error."""
        assert error.to_error()["code"] == code

    def test_to_error_omits_absent_data(self):
        """Test the error object without data."""
        assert MethodNotFoundError("foo").to_error() == {"code": -32601, "message": "Method 'foo' not found"}

    def test_to_error_with_data(self):
        """Test the error object with data."""
        error = UnsupportedProtocolVersionError("1.0", ["2025-06-18", "2024-11-05"])
        assert error.to_error() == {
            "code": -32602,
            "message": "Unsupported protocol version: 1.0",
            "data": {"supported": ["2025-06-18", "2024-11-05"], "requested": "1.0"},
        }

    def test_code_override(self):
        """Test per-instance code override."""
        assert ProtocolError("custom", code=-32099).to_error()["code"] == -32099
        assert ProtocolError("default").code == -32603


class TestMcpKitError:
    """Test the base error."""

    def test_to_dict(self):
        """Test diagnostic dict."""
        error = DuplicateNameError("tool", "echo")
        assert isinstance(error, McpKitError)
        assert error.to_dict() == {
            "error": "DuplicateNameError",
            "message": "Duplicate tool: echo",
            "details": {"kind": "tool", "key": "echo"},
        }
        assert str(error) == "Duplicate tool: echo"
