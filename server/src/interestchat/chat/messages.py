"""Notifications sent from the server to chat clients."""

from enum import Enum

from pydantic import BaseModel


class ServerMessageType(Enum):
    """Types of messages sent from server to client."""

    WAITING = "waiting"
    MATCHED = "matched"
    CHAT_MESSAGE = "chat_message"
    PARTNER_DISCONNECTED = "partner_disconnected"
    PONG = "pong"
    ERROR = "error"


class WaitingMessage(BaseModel):
    """Sent when a join found no partner and the client was queued."""

    type: str = "waiting"
    interest: str


class MatchedMessage(BaseModel):
    """Sent to both clients when they are paired into a room."""

    type: str = "matched"
    room: str
    partner: str


class ChatMessageOut(BaseModel):
    """A chat message relayed to every member of a room."""

    type: str = "chat_message"
    user: str
    message: str


class PartnerDisconnectedMessage(BaseModel):
    """Sent to the remaining member when the other one leaves or drops."""

    type: str = "partner_disconnected"


class PongMessage(BaseModel):
    """Response to ping."""

    type: str = "pong"


class ErrorMessage(BaseModel):
    """Error message."""

    type: str = "error"
    code: str
    message: str
