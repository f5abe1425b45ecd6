"""
Handlers for inbound signaling messages.

``offer`` is publish-style: the sender's offer is stored and every peer
learns it from the next state broadcast. ``answer`` is point-to-point and
reaches only the addressed peer.
"""

from uuid import UUID

from signaling.constants import MessageType
from signaling.logging import logger
from signaling.managers.connection_registry import connection_registry
from signaling.routing import message_router
from signaling.schemas.messages import (
    AnswerMessage,
    AnswerRequest,
    OfferRequest,
    StateMessage,
)
from signaling.utils.metrics import (
    ws_messages_dropped_total,
    ws_messages_sent_total,
)


async def broadcast_state() -> int:
    """
    Sends the current state of all connections to every connection.

    The snapshot is taken after the caller's registry update, so the
    message reflects it.

    Returns:
        Number of connections the state was delivered to.
    """
    snapshot = await connection_registry.snapshot()
    state = StateMessage.from_snapshot(snapshot)

    delivered = await connection_registry.broadcast(state.to_text())
    ws_messages_sent_total.labels(type=MessageType.STATE).inc(delivered)
    logger.debug(
        f"Broadcast state of {len(snapshot)} connection(s) to {delivered}"
    )
    return delivered


@message_router.register(MessageType.OFFER)
async def offer_handler(connection_id: UUID, message: OfferRequest) -> None:
    """Stores the sender's offer and re-broadcasts the state."""
    if not await connection_registry.set_offer(connection_id, message.offer):
        logger.debug(f"Dropped offer from closed connection {connection_id}")
        return

    logger.debug(f"Stored offer ({len(message.offer)} chars)")
    await broadcast_state()


@message_router.register(MessageType.ANSWER)
async def answer_handler(connection_id: UUID, message: AnswerRequest) -> None:
    """
    Relays an answer to the addressed peer.

    A target that is not registered (never existed or already closed) is a
    benign race; the answer is dropped and nothing else changes.
    """
    target_id = message.target_socket_guid
    answer = AnswerMessage(answer=message.answer)

    if not await connection_registry.contains(target_id):
        logger.debug(f"Dropped answer for unknown target {target_id}")
        ws_messages_dropped_total.labels(reason="unknown_target").inc()
        return

    if await connection_registry.send_to(target_id, answer.to_text()):
        ws_messages_sent_total.labels(type=MessageType.ANSWER).inc()
        logger.debug(f"Relayed answer to {target_id}")
