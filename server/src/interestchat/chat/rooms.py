"""Room manager for active two-party chat rooms."""

import logging
import uuid
from datetime import UTC, datetime

from interestchat.chat.messages import ChatMessageOut, PartnerDisconnectedMessage
from interestchat.chat.models import Connection, Room

logger = logging.getLogger(__name__)

ROOM_ID_PREFIX = "room_"
ROOM_ID_HEX_LENGTH = 12


def _generate_room_id() -> str:
    """Generate a random room identifier."""
    return f"{ROOM_ID_PREFIX}{uuid.uuid4().hex[:ROOM_ID_HEX_LENGTH]}"


class RoomManager:
    """Owns every active room and relays messages within them.

    This class is responsible for:
    - Allocating room identifiers and creating rooms at match time
    - Relaying chat messages to the members of a room
    - Tearing rooms down when a member leaves or disconnects

    Operations on rooms that no longer exist are no-ops. Not thread-safe
    on its own; ChatService serializes access.
    """

    def __init__(self) -> None:
        self._rooms: dict[str, Room] = {}  # room_id -> Room
        self._connection_to_room: dict[str, str] = {}  # connection_id -> room_id

    def create_room(
        self,
        first: Connection,
        first_name: str,
        second: Connection,
        second_name: str,
        interest: str,
    ) -> Room:
        """Create a room for two freshly matched connections.

        Args:
            first: The connection whose join completed the match
            first_name: Display name of the first connection
            second: The waiting connection it was matched with
            second_name: Display name of the second connection
            interest: Interest tag shared by both

        Returns:
            The new Room
        """
        room_id = _generate_room_id()
        while room_id in self._rooms:
            room_id = _generate_room_id()

        room = Room(
            id=room_id,
            members=(first, second),
            display_names={first.id: first_name, second.id: second_name},
            interest=interest,
        )
        self._rooms[room_id] = room
        self._connection_to_room[first.id] = room_id
        self._connection_to_room[second.id] = room_id

        logger.info(
            f"Room {room_id} created for {first_name} ({first.id}) and "
            f"{second_name} ({second.id}) on interest {interest!r}"
        )
        return room

    def get_room(self, room_id: str) -> Room | None:
        return self._rooms.get(room_id)

    def room_of(self, connection: Connection) -> Room | None:
        """Find the room a connection is currently a member of."""
        room_id = self._connection_to_room.get(connection.id)
        if room_id is None:
            return None
        return self._rooms.get(room_id)

    def relay(self, room_id: str, display_name: str, body: str) -> bool:
        """Deliver a chat message to every member of a room.

        Args:
            room_id: Target room
            display_name: Name the message is attributed to
            body: Message text

        Returns:
            True if the room existed and the message was delivered
        """
        room = self._rooms.get(room_id)
        if room is None:
            logger.debug(f"Dropping message for missing room {room_id}")
            return False

        message = ChatMessageOut(user=display_name, message=body).model_dump()
        for member in room.members:
            member.deliver(message)
        return True

    def leave(self, room_id: str, connection: Connection) -> bool:
        """Remove a member from a room and tear the room down.

        The remaining member is told their partner is gone. Rooms never
        outlive either member.

        Args:
            room_id: Room being left
            connection: Member that is leaving

        Returns:
            True if a room was torn down, False if there was nothing to do
        """
        room = self._rooms.get(room_id)
        if room is None:
            return False

        partner = room.partner_of(connection)
        if partner is None:
            logger.warning(f"Connection {connection.id} tried to leave room {room_id} it is not in")
            return False

        self._destroy(room)
        partner.deliver(PartnerDisconnectedMessage().model_dump())
        lifetime = (datetime.now(UTC) - room.created_at).total_seconds()
        logger.info(f"Room {room_id} closed after {connection.id} left (open {lifetime:.1f}s)")
        return True

    def _destroy(self, room: Room) -> None:
        del self._rooms[room.id]
        for member in room.members:
            if self._connection_to_room.get(member.id) == room.id:
                del self._connection_to_room[member.id]

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, room_id: object) -> bool:
        return room_id in self._rooms
