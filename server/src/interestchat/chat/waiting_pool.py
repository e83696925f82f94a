"""Waiting pool of unmatched join requests, partitioned by interest."""

import logging
from collections import deque
from datetime import UTC, datetime

from interestchat.chat.models import Connection, WaitingEntry

logger = logging.getLogger(__name__)


class WaitingPool:
    """FIFO queues of waiting entries keyed by interest tag.

    Interest tags are compared by exact, case-sensitive string equality.
    Queues that become empty are dropped, so an interest nobody waits for
    looks the same whether it was never seen or has been drained.

    Not thread-safe on its own; ChatService serializes access.
    """

    def __init__(self) -> None:
        self._queues: dict[str, deque[WaitingEntry]] = {}

    def enqueue(self, entry: WaitingEntry) -> None:
        """Append an entry to the back of its interest queue."""
        self._queues.setdefault(entry.interest, deque()).append(entry)
        logger.debug(
            f"Queued connection {entry.connection.id} under interest {entry.interest!r} "
            f"(queue length {len(self._queues[entry.interest])})"
        )

    def pop_partner(self, interest: str, requester: Connection) -> WaitingEntry | None:
        """Remove and return the earliest entry that is not the requester's own.

        Args:
            interest: Interest tag to search
            requester: Connection asking for a partner

        Returns:
            The matched entry, or None if no compatible entry is waiting
        """
        queue = self._queues.get(interest)
        if not queue:
            return None

        for index, entry in enumerate(queue):
            if entry.connection != requester:
                del queue[index]
                if not queue:
                    del self._queues[interest]
                return entry

        return None

    def remove_connection(self, connection: Connection) -> int:
        """Remove every entry that references a connection.

        Returns:
            Number of entries removed (zero if the connection was not waiting)
        """
        removed = 0
        for interest in list(self._queues):
            queue = self._queues[interest]
            stale = [entry for entry in queue if entry.connection == connection]
            if not stale:
                continue
            for entry in stale:
                queue.remove(entry)
            removed += len(stale)
            if not queue:
                del self._queues[interest]
        return removed

    def contains(self, connection: Connection) -> bool:
        """Check whether a connection has any waiting entry."""
        return any(
            entry.connection == connection
            for queue in self._queues.values()
            for entry in queue
        )

    def longest_wait(self, now: datetime | None = None) -> float:
        """Seconds the longest-waiting entry has been queued, 0.0 if nobody waits."""
        if not self._queues:
            return 0.0
        now = now or datetime.now(UTC)
        # Queue heads are the oldest entry of each interest
        oldest = min(queue[0].queued_at for queue in self._queues.values())
        return max((now - oldest).total_seconds(), 0.0)

    def queue_length(self, interest: str) -> int:
        return len(self._queues.get(interest, ()))

    def interests(self) -> list[str]:
        """Interest tags that currently have someone waiting."""
        return list(self._queues)

    def snapshot(self) -> dict[str, int]:
        """Waiting count per interest."""
        return {interest: len(queue) for interest, queue in self._queues.items()}

    def __len__(self) -> int:
        return sum(len(queue) for queue in self._queues.values())
