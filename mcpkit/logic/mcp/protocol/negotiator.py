"""
MCP Capability Negotiator

Drives the initialize handshake: validates the requested protocol version,
records client capabilities and moves the session to READY.
"""

import logging
from typing import Any, Callable, Iterable, Optional

from pydantic import ValidationError

from mcpkit.lib.exceptions import (
    AlreadyInitializedError,
    InvalidParamsError,
    NotInitializedError,
    UnsupportedProtocolVersionError,
)

from .capabilities import InitializeRequest, InitializeResponse, ServerCapabilities, ServerInfo
from .session import Session, SessionState

logger = logging.getLogger(__name__)


class CapabilityNegotiator:
    """
    Gatekeeper for the session lifecycle.

    Only `initialize` is accepted until the handshake succeeds; a failed
    handshake leaves the session UNINITIALIZED so the client can retry.
    """

    def __init__(
        self,
        server_info: ServerInfo,
        capabilities: ServerCapabilities,
        supported_versions: Iterable[str],
        session: Optional[Session] = None,
    ):
        """
        Initialize negotiator.

        Args:
            server_info: Name and version reported to the client
            capabilities: Capabilities advertised on success
            supported_versions: Protocol versions this server speaks
            session: Session to drive (a fresh one by default)
        """
        self.server_info = server_info
        self.capabilities = capabilities
        self.supported_versions = list(supported_versions)
        self.session = session or Session()
        self._ready_callbacks: list[Callable[[Session], None]] = []

    @property
    def is_initialized(self) -> bool:
        return self.session.is_ready

    def on_ready(self, callback: Callable[[Session], None]) -> None:
        """Register a callback invoked once the session reaches READY."""
        self._ready_callbacks.append(callback)

    def require_ready(self, method: str) -> None:
        """Raise NotInitializedError unless the handshake has completed."""
        if not self.session.handshake_complete:
            raise NotInitializedError(method)

    def initialize(self, params: Any) -> dict[str, Any]:
        """
        Handle initialize request.

        Returns:
            InitializeResult in wire form

        Raises:
            AlreadyInitializedError: If the session is already READY
            InvalidParamsError: If the params are malformed
            UnsupportedProtocolVersionError: If the version is not supported
        """
        if self.session.is_ready:
            raise AlreadyInitializedError()

        self.session.state = SessionState.INITIALIZING
        try:
            if not isinstance(params, dict):
                raise InvalidParamsError("Invalid initialize params: expected an object")
            try:
                init_request = InitializeRequest.model_validate(params)
            except ValidationError as e:
                raise InvalidParamsError(f"Invalid initialize params: {e.errors()[0]['msg']}") from e

            if init_request.protocol_version not in self.supported_versions:
                logger.warning(
                    f"Rejected protocol version {init_request.protocol_version!r}; "
                    f"supported: {self.supported_versions}"
                )
                raise UnsupportedProtocolVersionError(init_request.protocol_version, self.supported_versions)
        except Exception:
            self.session.state = SessionState.UNINITIALIZED
            raise

        self.session.protocol_version = init_request.protocol_version
        self.session.client_capabilities = init_request.capabilities
        self.session.client_info = init_request.client_info
        self.session.server_capabilities = self.capabilities
        self.session.state = SessionState.READY

        logger.info(
            f"Session initialized: {self.server_info.name} v{self.server_info.version} "
            f"(protocol {init_request.protocol_version}, client {init_request.client_info.get('name', 'unknown')})"
        )

        for callback in self._ready_callbacks:
            callback(self.session)

        response = InitializeResponse.create(
            server_name=self.server_info.name,
            server_version=self.server_info.version,
            capabilities=self.capabilities,
            protocol_version=init_request.protocol_version,
        )
        return response.to_wire()
