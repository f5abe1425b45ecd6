import asyncio
from dataclasses import dataclass
from uuid import UUID

from starlette.websockets import WebSocket, WebSocketDisconnect

from signaling.exceptions import DuplicateConnectionError
from signaling.logging import logger
from signaling.utils.metrics import ws_connections_active, ws_send_failures_total


@dataclass(slots=True)
class ConnectionEntry:
    """
    State of one open signaling connection.

    The WebSocket is borrowed from the transport; the registry sends on it
    but never closes it.
    """

    connection_id: UUID
    websocket: WebSocket
    pending_offer: str = ""


class ConnectionRegistry:
    """
    Registry of open signaling connections.

    Maps connection IDs to their entries and is the only holder of that
    mapping. Every access goes through a single ``asyncio.Lock``; sends are
    performed outside the lock on handles copied while holding it, so a
    slow peer never blocks registry updates from other connections.
    """

    def __init__(self) -> None:
        """
        Initializes an empty registry.

        ``connections`` preserves insertion order, which is also the order
        of the entries in ``snapshot()``.
        """
        self.connections: dict[UUID, ConnectionEntry] = {}
        self._lock = asyncio.Lock()

    async def insert(
        self, connection_id: UUID, websocket: WebSocket
    ) -> ConnectionEntry:
        """
        Registers a newly opened connection with an empty offer.

        Args:
            connection_id: Freshly generated identifier of the connection.
            websocket: The connection's WebSocket.

        Returns:
            The created entry.

        Raises:
            DuplicateConnectionError: If the identifier is already present.
        """
        async with self._lock:
            if connection_id in self.connections:
                raise DuplicateConnectionError(connection_id)

            entry = ConnectionEntry(
                connection_id=connection_id, websocket=websocket
            )
            self.connections[connection_id] = entry
            ws_connections_active.set(len(self.connections))

        logger.debug(
            f"websocket object ({id(websocket)}) registered "
            f"with id {connection_id}"
        )
        return entry

    async def remove(self, connection_id: UUID) -> None:
        """
        Removes a connection. Removing an unknown ID is a no-op.

        Args:
            connection_id: The identifier of the closed connection.
        """
        async with self._lock:
            entry = self.connections.pop(connection_id, None)
            ws_connections_active.set(len(self.connections))

        if entry is not None:
            logger.debug(
                f"websocket object ({id(entry.websocket)}) unregistered "
                f"for id {connection_id}"
            )

    async def set_offer(self, connection_id: UUID, offer: str) -> bool:
        """
        Overwrites the pending offer of a connection.

        An offer for a connection that already closed is dropped.

        Returns:
            True if the connection was registered.
        """
        async with self._lock:
            entry = self.connections.get(connection_id)
            if entry is None:
                return False
            entry.pending_offer = offer
            return True

    async def get(self, connection_id: UUID) -> ConnectionEntry | None:
        """Point lookup of a registered connection."""
        async with self._lock:
            return self.connections.get(connection_id)

    async def contains(self, connection_id: UUID) -> bool:
        async with self._lock:
            return connection_id in self.connections

    async def count(self) -> int:
        async with self._lock:
            return len(self.connections)

    async def snapshot(self) -> list[tuple[UUID, str]]:
        """
        Returns a point-in-time copy of all connection IDs and their offers.

        The result holds values only, so later registry updates cannot
        change a state message that is being built from it.
        """
        async with self._lock:
            return [
                (entry.connection_id, entry.pending_offer)
                for entry in self.connections.values()
            ]

    async def send_to(self, connection_id: UUID, payload: str) -> bool:
        """
        Sends a text frame to one registered connection.

        Args:
            connection_id: Target connection.
            payload: Text to send.

        Returns:
            True if the frame was handed to the transport, False if the
            target is not registered or the send failed.
        """
        async with self._lock:
            entry = self.connections.get(connection_id)
            websocket = entry.websocket if entry is not None else None

        if websocket is None:
            logger.debug(f"Send target {connection_id} is not registered")
            return False

        return await self._safe_send(connection_id, websocket, payload)

    async def broadcast(self, payload: str) -> int:
        """
        Sends a text frame to every registered connection concurrently.

        A failing send does not affect the remaining recipients, and the
        failing connection stays registered until its own close event.

        Args:
            payload: Text to send.

        Returns:
            Number of successful sends.
        """
        async with self._lock:
            recipients = [
                (entry.connection_id, entry.websocket)
                for entry in self.connections.values()
            ]

        if not recipients:
            return 0

        results = await asyncio.gather(
            *[
                self._safe_send(connection_id, websocket, payload)
                for connection_id, websocket in recipients
            ],
            return_exceptions=True,
        )
        return sum(1 for result in results if result is True)

    async def _safe_send(
        self, connection_id: UUID, websocket: WebSocket, payload: str
    ) -> bool:
        """
        Sends a text frame, containing any failure to this one send.

        Returns:
            True if the frame was handed to the transport.
        """
        try:
            await websocket.send_text(payload)
            return True
        except (WebSocketDisconnect, ConnectionError, RuntimeError) as e:
            # WebSocketDisconnect: Client disconnected
            # ConnectionError: Network errors
            # RuntimeError: WebSocket in invalid state
            logger.warning(
                f"Failed to send to connection {connection_id}: {e!r}"
            )
        except Exception as e:
            logger.warning(
                f"Unexpected error sending to connection {connection_id}: "
                f"{e!r}"
            )
        ws_send_failures_total.inc()
        return False


connection_registry = ConnectionRegistry()
