"""Tests for the stats API endpoint."""

import pytest
from httpx import AsyncClient

from interestchat.chat.models import Connection
from interestchat.chat.service import ChatService


@pytest.mark.asyncio
async def test_stats_empty(client: AsyncClient) -> None:
    """A fresh server has nobody waiting and no rooms."""
    response = await client.get("/api/stats")

    assert response.status_code == 200
    assert response.json() == {
        "connections": 0,
        "waiting": 0,
        "rooms": 0,
        "interests": {},
        "longest_wait_seconds": 0.0,
    }


@pytest.mark.asyncio
async def test_stats_counts(client: AsyncClient, fresh_chat_state: ChatService) -> None:
    """Stats reflect waiting clients per interest and active rooms."""
    service = fresh_chat_state
    await service.join("alice", "music", Connection())
    await service.join("bob", "music", Connection())
    await service.join("carol", "books", Connection())

    response = await client.get("/api/stats")

    assert response.status_code == 200
    data = response.json()
    assert data["waiting"] == 1
    assert data["rooms"] == 1
    assert data["interests"] == {"books": 1}
    assert data["longest_wait_seconds"] >= 0.0
