from typing import Any
from uuid import UUID, uuid4

from starlette import status
from starlette.endpoints import WebSocketEndpoint
from starlette.websockets import WebSocket

from signaling.api.ws.handlers.signaling import broadcast_state
from signaling.constants import MessageType
from signaling.exceptions import DuplicateConnectionError
from signaling.logging import (
    clear_log_context,
    logger,
    set_connection_id,
    set_log_context,
)
from signaling.managers.connection_registry import connection_registry
from signaling.schemas.messages import IdMessage
from signaling.utils.metrics import ws_connections_total, ws_messages_sent_total


class SignalingWebSocketEndpoint(WebSocketEndpoint):  # type: ignore[misc]
    """
    WebSocket endpoint managing the signaling connection lifecycle.

    Each connection gets its own endpoint instance. The only per-connection
    state is ``connection_id``, assigned on connect; everything else lives
    in the connection registry.
    """

    encoding = None  # Accept both text and byte frames
    connection_id: UUID | None = None

    async def dispatch(self) -> None:
        """
        Runs the WebSocket connection lifecycle.

        1. Calls on_connect, which registers the connection.
        2. Receives frames and passes them to on_receive until the client
           disconnects.
        3. Calls on_disconnect with the close code, also when receiving
           fails with an exception.

        If on_connect raises, on_disconnect is not called, so a failed
        registration never unregisters somebody else's entry.
        """
        websocket = WebSocket(self.scope, receive=self.receive, send=self.send)
        await self.on_connect(websocket)

        close_code = status.WS_1000_NORMAL_CLOSURE

        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.receive":
                    data = await self.decode(websocket, message)
                    await self.on_receive(websocket, data)
                elif message["type"] == "websocket.disconnect":
                    close_code = int(
                        message.get("code") or status.WS_1000_NORMAL_CLOSURE
                    )
                    break
        except Exception as exc:
            close_code = status.WS_1011_INTERNAL_ERROR
            raise exc
        finally:
            await self.on_disconnect(websocket, close_code)

    async def decode(
        self, websocket: WebSocket, message: dict[str, Any]
    ) -> str | bytes:
        """
        Returns the raw payload of a frame.

        Parsing happens in on_receive so that a malformed frame can be
        dropped without closing the connection.
        """
        if message.get("text") is not None:
            return message["text"]
        return message.get("bytes") or b""

    async def on_connect(self, websocket: WebSocket) -> None:
        """
        Registers a new connection and announces it.

        This method performs the following tasks:
        1. Accepts the WebSocket
        2. Generates a fresh connection ID and registers the connection
        3. Sends the client its ID
        4. Broadcasts the updated state to every connection

        Raises:
            DuplicateConnectionError: If the generated ID is already
                registered. The socket is closed before re-raising.
        """
        await super().on_connect(websocket)

        connection_id = uuid4()
        set_connection_id(str(connection_id))
        if websocket.client is not None:
            set_log_context(
                client=f"{websocket.client.host}:{websocket.client.port}"
            )

        try:
            await connection_registry.insert(connection_id, websocket)
        except DuplicateConnectionError:
            logger.error(f"Connection id {connection_id} is already registered")
            ws_connections_total.labels(status="rejected_duplicate").inc()
            await websocket.close(code=status.WS_1011_INTERNAL_ERROR)
            raise

        self.connection_id = connection_id
        ws_connections_total.labels(status="accepted").inc()
        logger.debug("Client connected to websocket")

        id_message = IdMessage(value=connection_id)
        if await connection_registry.send_to(
            connection_id, id_message.to_text()
        ):
            ws_messages_sent_total.labels(type=MessageType.ID).inc()

        await broadcast_state()

    async def on_disconnect(self, websocket: WebSocket, close_code: int) -> None:
        """
        Unregisters the connection and broadcasts the updated state to the
        remaining connections.
        """
        await super().on_disconnect(websocket, close_code)

        if self.connection_id is None:
            return

        await connection_registry.remove(self.connection_id)
        logger.debug(f"Client disconnected with code {close_code}")
        await broadcast_state()
        clear_log_context()
