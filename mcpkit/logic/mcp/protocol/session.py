"""Per-connection session state."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from .capabilities import ClientCapabilities, ServerCapabilities


class SessionState(str, Enum):
    """Lifecycle of a connection.

    UNINITIALIZED -> INITIALIZING -> READY -> SHUTTING_DOWN -> CLOSED
    """

    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    SHUTTING_DOWN = "shutting_down"
    CLOSED = "closed"

    def __str__(self) -> str:
        return self.value


class Session(BaseModel):
    """Negotiated protocol state for one connection."""

    state: SessionState = Field(default=SessionState.UNINITIALIZED)
    protocol_version: Optional[str] = Field(default=None)
    client_capabilities: Optional[ClientCapabilities] = Field(default=None)
    client_info: Optional[dict[str, Any]] = Field(default=None)
    server_capabilities: Optional[ServerCapabilities] = Field(default=None)

    model_config = {"validate_assignment": True}

    @property
    def is_ready(self) -> bool:
        return self.state == SessionState.READY

    @property
    def handshake_complete(self) -> bool:
        """True once READY, including while in-flight requests drain at shutdown."""
        return self.state in (SessionState.READY, SessionState.SHUTTING_DOWN)
