"""Matchmaking and room relay for interest-based chat.

Clients that share an interest tag are paired into private two-party rooms.
Everything lives in memory and is owned by a ChatService instance.
"""

from interestchat.chat.models import (
    ChatError,
    Connection,
    MatchResult,
    MatchStatus,
    Room,
    WaitingEntry,
)
from interestchat.chat.rooms import RoomManager
from interestchat.chat.service import ChatService
from interestchat.chat.waiting_pool import WaitingPool

__all__ = [
    "ChatError",
    "ChatService",
    "Connection",
    "MatchResult",
    "MatchStatus",
    "Room",
    "RoomManager",
    "WaitingEntry",
    "WaitingPool",
]
