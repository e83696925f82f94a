"""Data models for the chat matchmaking system."""

import asyncio
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Connection:
    """Handle to one client's bidirectional channel.

    A connection only has an identity and an outbound mailbox. Display name
    and interest belong to the join request, not to the connection. Messages
    put in the mailbox are written to the socket by the transport in order.
    """

    def __init__(self, connection_id: str | None = None) -> None:
        self.id = connection_id or uuid.uuid4().hex
        self.outbox: asyncio.Queue[dict[str, Any]] = asyncio.Queue()

    def deliver(self, message: dict[str, Any]) -> None:
        """Queue a message for this client without blocking."""
        self.outbox.put_nowait(message)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Connection) and other.id == self.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"Connection({self.id!r})"


@dataclass
class WaitingEntry:
    """A join request that has not found a partner yet."""

    display_name: str
    interest: str
    connection: Connection
    queued_at: datetime = field(default_factory=_utcnow)


@dataclass
class Room:
    """An active two-party conversation.

    Attributes:
        id: Room identifier shared with both members
        members: The two member connections, initiator first
        display_names: connection id -> display name used at join time
        interest: The interest tag that produced the match
        created_at: When the match happened
    """

    id: str
    members: tuple[Connection, Connection]
    display_names: dict[str, str]
    interest: str
    created_at: datetime = field(default_factory=_utcnow)

    def partner_of(self, connection: Connection) -> Connection | None:
        """Get the other member, or None if the connection is not a member."""
        first, second = self.members
        if connection == first:
            return second
        if connection == second:
            return first
        return None

    def display_name_of(self, connection: Connection) -> str | None:
        """Get the display name a member joined with."""
        return self.display_names.get(connection.id)


class MatchStatus(Enum):
    """Outcome of a join request."""

    MATCHED = "matched"
    WAITING = "waiting"


@dataclass
class MatchResult:
    """Result of ChatService.join."""

    status: MatchStatus
    room_id: str | None = None
    partner_name: str | None = None

    @property
    def matched(self) -> bool:
        return self.status == MatchStatus.MATCHED


@dataclass
class ChatError:
    """Error result for a rejected inbound event."""

    code: str
    message: str
