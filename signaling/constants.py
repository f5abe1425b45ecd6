"""
Protocol constants for the signaling relay.

These values define the wire protocol and must not be changed via
environment variables. For configurable values (listening address,
logging) see signaling/settings.py.
"""

from enum import StrEnum


class MessageType(StrEnum):
    """
    Discriminator values of the ``type`` field of every wire message.

    Attributes:
        ID: Server to client, once at open, carries the assigned identifier.
        STATE: Server to all clients, list of identifiers and their offers.
        OFFER: Client to server, publishes the sender's session offer.
        ANSWER: Client to server to one target peer.
    """

    ID = "id"
    STATE = "state"
    OFFER = "offer"
    ANSWER = "answer"


# Direction of each message type, shown by the CLI
MESSAGE_DIRECTIONS: dict[MessageType, str] = {
    MessageType.ID: "server → client",
    MessageType.STATE: "server → all clients",
    MessageType.OFFER: "client → server",
    MessageType.ANSWER: "client → server → target",
}
