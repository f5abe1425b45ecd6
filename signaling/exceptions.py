"""
Exception classes for the signaling relay.

Malformed inbound messages are recovered locally by the WebSocket
endpoint. A duplicate connection identifier is an internal consistency
fault and is never recovered.
"""


class SignalingError(Exception):
    """Base class for all signaling relay errors."""

    pass


class MessageParseError(SignalingError):
    """
    Inbound message could not be parsed.

    Raised for frames that are not UTF-8 JSON objects, carry an unknown
    or missing ``type``, miss a required field, or carry an unparseable
    target identifier.
    """

    pass


class DuplicateConnectionError(SignalingError):
    """
    Connection identifier is already registered.

    Identifiers are random UUIDs generated at open, so this signals a
    broken registry invariant rather than a client error.
    """

    def __init__(self, connection_id: object) -> None:
        super().__init__(f"Connection {connection_id} is already registered")
        self.connection_id = connection_id
