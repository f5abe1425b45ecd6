"""
WebSocket endpoint lifecycle and message handling tests.

This module tests connection registration, the id and state messages sent
on connect, cleanup on disconnect, and dropping of malformed frames.
"""

import json
from unittest.mock import patch
from uuid import UUID, uuid4

import pytest
from prometheus_client import REGISTRY
from starlette import status
from starlette.websockets import WebSocketDisconnect

from signaling.api.ws.consumers.relay import Relay
from signaling.api.ws.websocket import SignalingWebSocketEndpoint
from signaling.exceptions import DuplicateConnectionError
from signaling.managers.connection_registry import connection_registry
from tests.mocks.websocket_mocks import create_mock_websocket, sent_messages


def create_endpoint(endpoint_class=Relay):
    """Creates an endpoint instance the way Starlette does per connection."""
    return endpoint_class(scope={"type": "websocket"}, receive=None, send=None)  # type: ignore


async def connect(endpoint_class=Relay):
    """Runs on_connect for a new mocked connection."""
    endpoint = create_endpoint(endpoint_class)
    mock_ws = create_mock_websocket()
    await endpoint.on_connect(mock_ws)
    return endpoint, mock_ws


class TestWebSocketConnect:
    """Test connection registration on connect."""

    @pytest.mark.asyncio
    async def test_connect_registers_and_sends_id_then_state(self):
        endpoint, mock_ws = await connect()

        mock_ws.accept.assert_called_once()
        assert isinstance(endpoint.connection_id, UUID)
        assert await connection_registry.contains(endpoint.connection_id)

        assert sent_messages(mock_ws) == [
            {"type": "id", "value": str(endpoint.connection_id)},
            {
                "type": "state",
                "sockets": [
                    {"socketGuid": str(endpoint.connection_id), "offer": ""}
                ],
            },
        ]

    @pytest.mark.asyncio
    async def test_connect_broadcasts_state_to_existing_peers(self):
        first, first_ws = await connect()
        second, second_ws = await connect()

        expected_state = {
            "type": "state",
            "sockets": [
                {"socketGuid": str(first.connection_id), "offer": ""},
                {"socketGuid": str(second.connection_id), "offer": ""},
            ],
        }
        assert sent_messages(first_ws)[-1] == expected_state
        assert sent_messages(second_ws) == [
            {"type": "id", "value": str(second.connection_id)},
            expected_state,
        ]

    @pytest.mark.asyncio
    async def test_connect_ids_are_unique(self):
        endpoints = [(await connect())[0] for _ in range(5)]

        assert len({endpoint.connection_id for endpoint in endpoints}) == 5

    @pytest.mark.asyncio
    async def test_failed_id_send_is_not_counted_as_sent(self):
        """Test the id message only counts as sent once it reached the socket."""

        def id_sent():
            value = REGISTRY.get_sample_value(
                "ws_messages_sent_total", {"type": "id"}
            )
            return value or 0.0

        before = id_sent()
        endpoint = create_endpoint()
        mock_ws = create_mock_websocket(
            send_error=WebSocketDisconnect(code=1006)
        )

        await endpoint.on_connect(mock_ws)

        assert id_sent() == before
        # The connection stays registered until its own close event
        assert await connection_registry.contains(endpoint.connection_id)

        await connect()

        assert id_sent() == before + 1

    @pytest.mark.asyncio
    async def test_duplicate_connection_id_is_fatal(self):
        existing_id = uuid4()
        existing_ws = create_mock_websocket()
        await connection_registry.insert(existing_id, existing_ws)

        endpoint = create_endpoint()
        mock_ws = create_mock_websocket()

        with patch(
            "signaling.api.ws.websocket.uuid4", return_value=existing_id
        ):
            with pytest.raises(DuplicateConnectionError):
                await endpoint.on_connect(mock_ws)

        mock_ws.close.assert_called_once_with(
            code=status.WS_1011_INTERNAL_ERROR
        )
        mock_ws.send_text.assert_not_called()
        assert endpoint.connection_id is None
        # The legitimate entry is untouched
        entry = await connection_registry.get(existing_id)
        assert entry.websocket is existing_ws


class TestWebSocketDisconnect:
    """Test cleanup on disconnect."""

    @pytest.mark.asyncio
    async def test_disconnect_unregisters_and_broadcasts(self):
        first, first_ws = await connect()
        second, second_ws = await connect()
        first_ws.send_text.reset_mock()

        await second.on_disconnect(second_ws, status.WS_1000_NORMAL_CLOSURE)

        assert not await connection_registry.contains(second.connection_id)
        assert sent_messages(first_ws) == [
            {
                "type": "state",
                "sockets": [
                    {"socketGuid": str(first.connection_id), "offer": ""}
                ],
            }
        ]

    @pytest.mark.asyncio
    async def test_disconnect_without_registration_is_noop(self):
        _, peer_ws = await connect()
        peer_ws.send_text.reset_mock()
        endpoint = create_endpoint(SignalingWebSocketEndpoint)

        await endpoint.on_disconnect(create_mock_websocket(), 1006)

        assert await connection_registry.count() == 1
        peer_ws.send_text.assert_not_called()


class TestWebSocketReceive:
    """Test inbound frame handling."""

    @pytest.mark.asyncio
    async def test_offer_frame_updates_state(self):
        endpoint, mock_ws = await connect()
        mock_ws.send_text.reset_mock()

        await endpoint.on_receive(
            mock_ws, json.dumps({"type": "offer", "offer": "SDP1"})
        )

        assert sent_messages(mock_ws) == [
            {
                "type": "state",
                "sockets": [
                    {"socketGuid": str(endpoint.connection_id), "offer": "SDP1"}
                ],
            }
        ]

    @pytest.mark.asyncio
    async def test_offer_bytes_frame_is_accepted(self):
        endpoint, mock_ws = await connect()

        await endpoint.on_receive(mock_ws, b'{"type":"offer","offer":"SDP1"}')

        entry = await connection_registry.get(endpoint.connection_id)
        assert entry.pending_offer == "SDP1"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "frame",
        [
            "not json",
            '{"type":"offer"}',
            '{"type":"bogus"}',
            '{"type":"answer","targetSocketGuid":"X","answer":"SDP2"}',
            b"\x80\x81",
        ],
    )
    async def test_malformed_frame_is_dropped(self, frame):
        """Test malformed frames get no reply and keep the socket open."""
        endpoint, mock_ws = await connect()
        mock_ws.send_text.reset_mock()

        await endpoint.on_receive(mock_ws, frame)

        mock_ws.send_text.assert_not_called()
        mock_ws.close.assert_not_called()
        assert await connection_registry.contains(endpoint.connection_id)

    @pytest.mark.asyncio
    async def test_answer_frame_reaches_target(self):
        first, first_ws = await connect()
        second, second_ws = await connect()
        first_ws.send_text.reset_mock()
        second_ws.send_text.reset_mock()

        await second.on_receive(
            second_ws,
            json.dumps(
                {
                    "type": "answer",
                    "targetSocketGuid": str(first.connection_id),
                    "answer": "SDP2",
                }
            ),
        )

        assert sent_messages(first_ws) == [{"type": "answer", "answer": "SDP2"}]
        second_ws.send_text.assert_not_called()


class TestDecode:
    """Test raw frame extraction."""

    @pytest.mark.asyncio
    async def test_decode_text_frame(self):
        endpoint = create_endpoint()

        data = await endpoint.decode(
            create_mock_websocket(), {"type": "websocket.receive", "text": ""}
        )

        assert data == ""

    @pytest.mark.asyncio
    async def test_decode_bytes_frame(self):
        endpoint = create_endpoint()

        data = await endpoint.decode(
            create_mock_websocket(),
            {"type": "websocket.receive", "bytes": b"{}"},
        )

        assert data == b"{}"
