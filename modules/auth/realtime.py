"""
Realtime channel opened for an authenticated session.

The backend runs a Socket.IO server that authenticates the handshake with
the access token. A failed connection is logged and never fails a login.
"""

import logging
from typing import Any, Callable, Optional, Protocol, runtime_checkable

import socketio
from socketio.exceptions import ConnectionError as SocketConnectionError

from shared.config import get_settings

logger = logging.getLogger(__name__)


@runtime_checkable
class IRealtimeConnection(Protocol):
    """Connection the session manager opens on login and closes on logout."""

    @property
    def connected(self) -> bool:
        ...

    async def connect(self, token: str) -> None:
        """Open the channel authenticated with ``token``. Must not raise."""
        ...

    async def disconnect(self) -> None:
        """Close the channel if open. Must not raise."""
        ...


class SocketIORealtimeConnection:
    """IRealtimeConnection backed by a python-socketio AsyncClient."""

    def __init__(
        self,
        url: Optional[str] = None,
        client_factory: Optional[Callable[[], Any]] = None,
    ):
        """
        Args:
            url: Socket.IO server URL. Defaults to HIVE_SOCKET_URL.
            client_factory: Builds the underlying client; tests inject a mock.
        """
        self._url = url or get_settings().socket_url
        self._client_factory = client_factory or socketio.AsyncClient
        self._client: Optional[Any] = None
        self._handlers: list[tuple[str, Callable]] = []

    @property
    def connected(self) -> bool:
        return self._client is not None and bool(self._client.connected)

    def on(self, event: str, handler: Callable) -> None:
        """Register an event handler, applied to current and future connections."""
        self._handlers.append((event, handler))
        if self._client is not None:
            self._client.on(event, handler)

    async def emit(self, event: str, data: Any = None) -> None:
        if self.connected:
            await self._client.emit(event, data)

    async def connect(self, token: str) -> None:
        if not token:
            return
        # A new login replaces any channel opened for a previous token
        await self.disconnect()

        client = self._client_factory()
        for event, handler in self._handlers:
            client.on(event, handler)
        self._client = client

        try:
            await client.connect(self._url, auth={"token": token})
            logger.info("Realtime channel connected")
        except SocketConnectionError as e:
            logger.warning(f"Realtime connection error: {e}")

    async def disconnect(self) -> None:
        client, self._client = self._client, None
        if client is None:
            return
        try:
            await client.disconnect()
            logger.info("Realtime channel disconnected")
        except Exception as e:
            logger.warning(f"Realtime disconnect failed: {e}")
