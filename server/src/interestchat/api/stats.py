"""Chat statistics endpoint."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from interestchat.api.rate_limit import stats_rate_limit
from interestchat.chat.service import ChatService
from interestchat.dependencies import get_chat_service
from interestchat.ws.chat_handler import chat_connection_registry

router = APIRouter(prefix="/stats", tags=["stats"])


class StatsResponse(BaseModel):
    """Snapshot of the chat server's in-memory state."""

    connections: int
    waiting: int
    rooms: int
    interests: dict[str, int]
    longest_wait_seconds: float


@router.get("", response_model=StatsResponse, dependencies=[Depends(stats_rate_limit)])
async def get_stats(service: ChatService = Depends(get_chat_service)) -> StatsResponse:
    """Report how many clients are connected, waiting and chatting.

    ``interests`` maps each interest tag to the number of clients waiting on it;
    ``longest_wait_seconds`` is how long the oldest waiting client has been queued.
    """
    stats = service.stats()
    return StatsResponse(
        connections=len(chat_connection_registry),
        waiting=stats["waiting"],
        rooms=stats["rooms"],
        interests=stats["interests"],
        longest_wait_seconds=stats["longest_wait_seconds"],
    )
