"""Tests for the waiting pool."""

from datetime import UTC, datetime, timedelta

from interestchat.chat.models import Connection, WaitingEntry
from interestchat.chat.waiting_pool import WaitingPool


def _entry(name: str, interest: str, connection: Connection | None = None) -> WaitingEntry:
    return WaitingEntry(name, interest, connection or Connection())


class TestEnqueue:
    """Tests for adding entries."""

    def test_enqueue_creates_queue(self) -> None:
        """Enqueueing under a new interest creates its queue."""
        pool = WaitingPool()
        pool.enqueue(_entry("alice", "music"))

        assert pool.queue_length("music") == 1
        assert pool.interests() == ["music"]
        assert len(pool) == 1

    def test_interests_are_case_sensitive(self) -> None:
        """'Music' and 'music' are different interests."""
        pool = WaitingPool()
        pool.enqueue(_entry("alice", "music"))
        pool.enqueue(_entry("bob", "Music"))

        assert pool.queue_length("music") == 1
        assert pool.queue_length("Music") == 1
        assert pool.snapshot() == {"music": 1, "Music": 1}


class TestPopPartner:
    """Tests for finding a partner."""

    def test_unseen_interest_returns_none(self) -> None:
        """An interest nobody queued under behaves like an empty queue."""
        pool = WaitingPool()
        assert pool.pop_partner("gardening", Connection()) is None

    def test_fifo_order(self) -> None:
        """The earliest waiting entry is returned first."""
        pool = WaitingPool()
        first, second, third = _entry("a", "x"), _entry("b", "x"), _entry("c", "x")
        for entry in (first, second, third):
            pool.enqueue(entry)

        requester = Connection()
        assert pool.pop_partner("x", requester) is first
        assert pool.pop_partner("x", requester) is second
        assert pool.pop_partner("x", requester) is third
        assert pool.pop_partner("x", requester) is None

    def test_skips_requester_own_entry(self) -> None:
        """A connection is never handed its own waiting entry."""
        pool = WaitingPool()
        me = Connection()
        pool.enqueue(_entry("me", "x", me))

        assert pool.pop_partner("x", me) is None
        assert pool.queue_length("x") == 1

    def test_skips_self_but_takes_next(self) -> None:
        """The self guard does not block later entries."""
        pool = WaitingPool()
        me = Connection()
        other = _entry("other", "x")
        pool.enqueue(_entry("me", "x", me))
        pool.enqueue(other)

        assert pool.pop_partner("x", me) is other
        assert pool.contains(me)
        assert pool.queue_length("x") == 1

    def test_emptied_queue_is_dropped(self) -> None:
        """Taking the last entry removes the interest entirely."""
        pool = WaitingPool()
        pool.enqueue(_entry("alice", "books"))

        pool.pop_partner("books", Connection())

        assert pool.interests() == []
        assert pool.queue_length("books") == 0


class TestRemoveConnection:
    """Tests for scrubbing a connection."""

    def test_remove_waiting_connection(self) -> None:
        """Removing a waiting connection empties its queue."""
        pool = WaitingPool()
        alice = Connection()
        pool.enqueue(_entry("alice", "books", alice))

        assert pool.remove_connection(alice) == 1
        assert not pool.contains(alice)
        assert pool.interests() == []

    def test_remove_unknown_connection(self) -> None:
        """Removing a connection that never waited is a no-op."""
        pool = WaitingPool()
        pool.enqueue(_entry("alice", "books"))

        assert pool.remove_connection(Connection()) == 0
        assert len(pool) == 1

    def test_remove_across_interests(self) -> None:
        """Every entry for the connection is removed, whatever the interest."""
        pool = WaitingPool()
        alice = Connection()
        bob = _entry("bob", "music")
        pool.enqueue(_entry("alice", "books", alice))
        pool.enqueue(_entry("alice", "music", alice))
        pool.enqueue(bob)

        assert pool.remove_connection(alice) == 2
        assert pool.snapshot() == {"music": 1}
        assert pool.pop_partner("music", Connection()) is bob

    def test_remove_keeps_order_of_others(self) -> None:
        """Removing from the middle keeps everyone else in arrival order."""
        pool = WaitingPool()
        a, b, c = _entry("a", "x"), _entry("b", "x"), _entry("c", "x")
        for entry in (a, b, c):
            pool.enqueue(entry)

        pool.remove_connection(b.connection)

        requester = Connection()
        assert pool.pop_partner("x", requester) is a
        assert pool.pop_partner("x", requester) is c

    def test_remove_leaves_other_queues_untouched(self) -> None:
        """Queues without the connection keep their deque object."""
        pool = WaitingPool()
        alice = Connection()
        pool.enqueue(_entry("alice", "books", alice))
        pool.enqueue(_entry("bob", "music"))
        music_queue = pool._queues["music"]

        pool.remove_connection(alice)

        assert pool._queues["music"] is music_queue
        assert pool.snapshot() == {"music": 1}


class TestLongestWait:
    """Tests for the longest current wait."""

    def test_empty_pool(self) -> None:
        """Nobody waiting means no wait."""
        assert WaitingPool().longest_wait() == 0.0

    def test_oldest_head_across_interests(self) -> None:
        """The oldest entry of any interest sets the wait."""
        start = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
        pool = WaitingPool()
        later = start + timedelta(seconds=3)
        pool.enqueue(WaitingEntry("a", "music", Connection(), queued_at=later))
        pool.enqueue(WaitingEntry("b", "books", Connection(), queued_at=start))

        assert pool.longest_wait(now=start + timedelta(seconds=5)) == 5.0

    def test_drops_to_zero_once_matched(self) -> None:
        """A matched entry no longer counts."""
        start = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
        pool = WaitingPool()
        pool.enqueue(WaitingEntry("a", "music", Connection(), queued_at=start))

        pool.pop_partner("music", Connection())

        assert pool.longest_wait(now=start + timedelta(seconds=5)) == 0.0
