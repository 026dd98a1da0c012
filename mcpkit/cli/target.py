"""Resolution of `module:attribute` and `path/to/file.py:attribute` targets."""

import importlib
import importlib.util
import sys
from pathlib import Path

from mcpkit.logic.mcp.core.server import McpServer

DEFAULT_ATTRIBUTE = "server"


class TargetError(Exception):
    """Raised when a target cannot be resolved to an McpServer."""


def split_target(target: str) -> tuple[str, str]:
    """Split TARGET into (module or path, attribute)."""
    location, sep, attribute = target.rpartition(":")
    # No colon, or a bare drive letter such as C:\servers\echo.py
    if not sep or not location or "/" in attribute or "\\" in attribute:
        return target, DEFAULT_ATTRIBUTE
    return location, attribute or DEFAULT_ATTRIBUTE


def _load_file(path: Path):
    if not path.is_file():
        raise TargetError(f"File not found: {path}")
    module_name = f"mcpkit_target_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise TargetError(f"Cannot import {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    # Let the file import its siblings
    sys.path.insert(0, str(path.parent.resolve()))
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        sys.modules.pop(module_name, None)
        raise TargetError(f"Error while importing {path}: {e}") from e
    finally:
        sys.path.remove(str(path.parent.resolve()))
    return module


def _load_module(name: str):
    try:
        return importlib.import_module(name)
    except ImportError as e:
        raise TargetError(f"Cannot import module '{name}': {e}") from e


def load_server(target: str) -> McpServer:
    """
    Import TARGET and return the McpServer it names.

    The attribute may be an McpServer or a zero-argument factory returning one.

    Raises:
        TargetError: If the target cannot be imported or is not a server
    """
    location, attribute = split_target(target)
    if location.endswith(".py") or "/" in location or "\\" in location:
        module = _load_file(Path(location))
    else:
        module = _load_module(location)

    try:
        obj = getattr(module, attribute)
    except AttributeError:
        raise TargetError(f"'{location}' has no attribute '{attribute}'") from None

    if not isinstance(obj, McpServer) and callable(obj):
        obj = obj()
    if not isinstance(obj, McpServer):
        raise TargetError(f"'{target}' is {type(obj).__name__}, not an McpServer")
    return obj
