import time
from typing import Any

from fastapi import APIRouter
from starlette.websockets import WebSocket

from signaling.api.ws.handlers import load_handlers
from signaling.api.ws.websocket import SignalingWebSocketEndpoint
from signaling.exceptions import MessageParseError
from signaling.logging import logger
from signaling.routing import message_router
from signaling.schemas.messages import parse_inbound_message
from signaling.settings import app_settings
from signaling.utils.metrics import (
    ws_message_processing_duration_seconds,
    ws_messages_dropped_total,
    ws_messages_received_total,
)

load_handlers()

router = APIRouter()


@router.websocket_route(app_settings.WS_PATH)
class Relay(SignalingWebSocketEndpoint):
    """
    Signaling relay WebSocket endpoint.

    Parses every inbound frame and routes it through ``message_router``.
    Malformed frames are dropped; the connection stays open.
    """

    async def on_receive(self, websocket: WebSocket, data: Any) -> None:
        """
        Handles one inbound frame.

        Args:
            websocket: The WebSocket connection instance
            data (str | bytes): Raw frame payload
        """
        try:
            message = parse_inbound_message(data)
        except MessageParseError as ex:
            logger.debug(f"Dropped invalid message: {ex}")
            ws_messages_dropped_total.labels(reason="invalid").inc()
            return

        ws_messages_received_total.labels(type=message.type).inc()

        start_time = time.time()
        await message_router.dispatch(self.connection_id, message)
        duration = time.time() - start_time

        ws_message_processing_duration_seconds.labels(
            type=message.type
        ).observe(duration)
