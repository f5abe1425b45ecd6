from typing import Literal, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from typing_extensions import Annotated

from signaling.exceptions import MessageParseError


class MessageModel(BaseModel):  # type: ignore[misc]
    """
    Base model for signaling wire messages.

    Fields use snake_case names in Python and camelCase aliases on the
    wire. Outbound messages are always serialized with ``to_text()``.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_text(self) -> str:
        """Serializes the message to a compact JSON text frame."""
        return self.model_dump_json(by_alias=True)


# ============================================================================
# Outbound (server → client)
# ============================================================================


class IdMessage(MessageModel):
    type: Literal["id"] = "id"
    value: UUID


class SocketStateModel(MessageModel):
    socket_guid: UUID = Field(alias="socketGuid")
    offer: str = ""


class StateMessage(MessageModel):
    """
    List of every registered connection and its last offer.

    Sent to all connections whenever membership or an offer changes.
    """

    type: Literal["state"] = "state"
    sockets: list[SocketStateModel] = []

    @classmethod
    def from_snapshot(cls, snapshot: list[tuple[UUID, str]]) -> "StateMessage":
        return cls(
            sockets=[
                SocketStateModel(socket_guid=connection_id, offer=offer)
                for connection_id, offer in snapshot
            ]
        )


class AnswerMessage(MessageModel):
    """Answer delivered to the addressed peer only."""

    type: Literal["answer"] = "answer"
    answer: str


# ============================================================================
# Inbound (client → server)
# ============================================================================


class OfferRequest(MessageModel):
    """Publishes the sender's offer; carries no target."""

    type: Literal["offer"]
    offer: str


class AnswerRequest(MessageModel):
    type: Literal["answer"]
    target_socket_guid: UUID = Field(alias="targetSocketGuid")
    answer: str


InboundMessage = Annotated[
    Union[OfferRequest, AnswerRequest], Field(discriminator="type")
]

inbound_adapter: TypeAdapter[InboundMessage] = TypeAdapter(InboundMessage)


def parse_inbound_message(data: str | bytes) -> OfferRequest | AnswerRequest:
    """
    Parses an inbound text or byte frame into a typed message.

    Args:
        data: Raw frame payload.

    Returns:
        The parsed message.

    Raises:
        MessageParseError: If the frame is not UTF-8, not a JSON object, has
            an unknown or missing ``type``, misses a required field or
            carries an unparseable target identifier.
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as ex:
            raise MessageParseError(f"Frame is not valid UTF-8: {ex}") from ex

    try:
        return inbound_adapter.validate_json(data)
    except ValidationError as ex:
        raise MessageParseError(
            f"Invalid signaling message: {ex.error_count()} error(s), "
            f"first: {ex.errors()[0]['msg']}"
        ) from ex
