"""Chat service: matchmaking, relay and cleanup behind a single lock.

ChatService is the one owner of matching state. It holds the waiting pool
and the room manager and runs every join, relay, leave and disconnect as a
single critical section, so a lookup in the waiting pool and the enqueue or
match that follows can never interleave with another event.

Deliveries are non-blocking mailbox puts made inside the critical section,
which fixes the order in which each client sees its messages.
"""

import asyncio
import logging
from typing import Any

from interestchat.chat.messages import MatchedMessage, WaitingMessage
from interestchat.chat.models import (
    Connection,
    MatchResult,
    MatchStatus,
    WaitingEntry,
)
from interestchat.chat.rooms import RoomManager
from interestchat.chat.waiting_pool import WaitingPool

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_NAME = "System"


def shared_interest_notice(interest: str) -> str:
    """Text of the system message that opens every room."""
    return f"You both have the same interest: {interest}"


class ChatService:
    """Pairs waiting clients by interest and manages their rooms."""

    def __init__(
        self,
        waiting_pool: WaitingPool | None = None,
        rooms: RoomManager | None = None,
        system_name: str = DEFAULT_SYSTEM_NAME,
    ) -> None:
        """Initialize the chat service.

        Args:
            waiting_pool: Waiting pool to use (a fresh one if None)
            rooms: Room manager to use (a fresh one if None)
            system_name: Display name attached to system notices
        """
        self.waiting_pool = waiting_pool if waiting_pool is not None else WaitingPool()
        self.rooms = rooms if rooms is not None else RoomManager()
        self.system_name = system_name
        self._lock = asyncio.Lock()

    async def join(self, display_name: str, interest: str, connection: Connection) -> MatchResult:
        """Match a connection with someone waiting on the same interest, or queue it.

        A connection that is already waiting or already in a room has that
        state cancelled first: the old waiting entry is dropped and an old
        room is left as if the client had left it explicitly.

        Args:
            display_name: Name shown to the partner
            interest: Interest tag, matched by exact string equality
            connection: The requesting connection

        Returns:
            MatchResult describing whether a room was created
        """
        async with self._lock:
            self._release(connection, reason="rejoin")

            candidate = self.waiting_pool.pop_partner(interest, connection)
            if candidate is None:
                self.waiting_pool.enqueue(WaitingEntry(display_name, interest, connection))
                connection.deliver(WaitingMessage(interest=interest).model_dump())
                logger.info(f"{display_name} ({connection.id}) waiting on interest {interest!r}")
                return MatchResult(status=MatchStatus.WAITING)

            room = self.rooms.create_room(
                connection,
                display_name,
                candidate.connection,
                candidate.display_name,
                interest,
            )

            connection.deliver(
                MatchedMessage(room=room.id, partner=candidate.display_name).model_dump()
            )
            candidate.connection.deliver(
                MatchedMessage(room=room.id, partner=display_name).model_dump()
            )
            self.rooms.relay(room.id, self.system_name, shared_interest_notice(interest))

            return MatchResult(
                status=MatchStatus.MATCHED,
                room_id=room.id,
                partner_name=candidate.display_name,
            )

    async def relay(self, room_id: str, sender: Connection, body: str) -> bool:
        """Relay a chat message from a room member to the room.

        The message is attributed to the name the sender joined with.
        Messages for rooms that are gone, or from connections that are not
        members, are dropped.

        Returns:
            True if the message was delivered
        """
        async with self._lock:
            room = self.rooms.get_room(room_id)
            if room is None:
                return False

            display_name = room.display_name_of(sender)
            if display_name is None:
                logger.warning(f"Connection {sender.id} is not a member of room {room_id}")
                return False

            return self.rooms.relay(room_id, display_name, body)

    async def leave(self, room_id: str, connection: Connection) -> bool:
        """Leave a room, notifying the partner. No-op if the room is gone."""
        async with self._lock:
            return self.rooms.leave(room_id, connection)

    async def disconnect(self, connection: Connection) -> None:
        """Remove every trace of a connection that went away.

        Safe for connections that never joined and for repeated calls.
        """
        async with self._lock:
            self._release(connection, reason="disconnect")

    def _release(self, connection: Connection, reason: str) -> None:
        """Drop a connection's waiting entries and leave its room.

        Must be called with self._lock held.
        """
        removed = self.waiting_pool.remove_connection(connection)
        if removed:
            logger.info(f"Removed {removed} waiting entry for {connection.id} ({reason})")

        room = self.rooms.room_of(connection)
        if room is not None:
            self.rooms.leave(room.id, connection)
            logger.info(f"Connection {connection.id} left room {room.id} ({reason})")

    def is_waiting(self, connection: Connection) -> bool:
        return self.waiting_pool.contains(connection)

    def room_of(self, connection: Connection) -> str | None:
        """Get the id of the room a connection is in, if any."""
        room = self.rooms.room_of(connection)
        return room.id if room else None

    def stats(self) -> dict[str, Any]:
        """Summary of waiting clients and active rooms."""
        return {
            "waiting": len(self.waiting_pool),
            "rooms": len(self.rooms),
            "interests": self.waiting_pool.snapshot(),
            "longest_wait_seconds": self.waiting_pool.longest_wait(),
        }
