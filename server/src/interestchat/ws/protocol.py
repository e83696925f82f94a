"""WebSocket protocol message types."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator

from interestchat.chat.messages import (
    ChatMessageOut,
    ErrorMessage,
    MatchedMessage,
    PartnerDisconnectedMessage,
    PongMessage,
    ServerMessageType,
    WaitingMessage,
)
from interestchat.chat.models import ChatError
from interestchat.settings import get_settings

__all__ = [
    "ChatMessageIn",
    "ChatMessageOut",
    "ClientMessage",
    "ClientMessageType",
    "ErrorMessage",
    "JoinMessage",
    "LeaveRoomMessage",
    "MatchedMessage",
    "PartnerDisconnectedMessage",
    "PingMessage",
    "PongMessage",
    "ServerMessageType",
    "WaitingMessage",
    "parse_client_message",
]


class ClientMessageType(Enum):
    """Types of messages sent from client to server."""

    JOIN = "join"
    CHAT_MESSAGE = "chat_message"
    LEAVE_ROOM = "leave_room"
    PING = "ping"


def _require_text(value: str, field_name: str, max_length: int) -> str:
    if not value.strip():
        raise ValueError(f"{field_name} must not be blank")
    if len(value) > max_length:
        raise ValueError(f"{field_name} must be at most {max_length} characters")
    return value


# Client -> Server Messages


class JoinMessage(BaseModel):
    """Request to be paired with someone sharing an interest."""

    type: str = "join"
    username: str
    interest: str

    @field_validator("username")
    @classmethod
    def check_username(cls, value: str) -> str:
        return _require_text(value.strip(), "username", get_settings().max_display_name_length)

    @field_validator("interest")
    @classmethod
    def check_interest(cls, value: str) -> str:
        # Interests match by exact string, so they are not normalized
        return _require_text(value, "interest", get_settings().max_interest_length)


class ChatMessageIn(BaseModel):
    """A chat message for the sender's room.

    Clients may send a ``user`` field; it is ignored in favour of the name
    the sender joined with.
    """

    type: str = "chat_message"
    room: str
    message: str

    @field_validator("message")
    @classmethod
    def check_message(cls, value: str) -> str:
        return _require_text(value, "message", get_settings().max_message_length)


class LeaveRoomMessage(BaseModel):
    """Request to leave a room."""

    type: str = "leave_room"
    room: str


class PingMessage(BaseModel):
    """Keepalive ping."""

    type: str = "ping"


ClientMessage = JoinMessage | ChatMessageIn | LeaveRoomMessage | PingMessage

_CLIENT_MESSAGE_MODELS: dict[str, type[BaseModel]] = {
    ClientMessageType.JOIN.value: JoinMessage,
    ClientMessageType.CHAT_MESSAGE.value: ChatMessageIn,
    ClientMessageType.LEAVE_ROOM.value: LeaveRoomMessage,
    ClientMessageType.PING.value: PingMessage,
}


def parse_client_message(data: Any) -> ClientMessage | ChatError:
    """Parse a client message from JSON data.

    Args:
        data: Parsed JSON data

    Returns:
        Parsed message, or ChatError describing why it was rejected
    """
    if not isinstance(data, dict):
        return ChatError(code="invalid_message", message="Message must be a JSON object")

    msg_type = data.get("type")
    model = _CLIENT_MESSAGE_MODELS.get(msg_type) if isinstance(msg_type, str) else None
    if model is None:
        return ChatError(code="unknown_message", message=f"Unknown message type: {msg_type}")

    try:
        return model.model_validate(data)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        return ChatError(code="invalid_message", message=details)
