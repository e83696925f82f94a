"""Pytest configuration and fixtures."""

import os

# Disable rate limiting for all tests
os.environ["RATE_LIMITING_ENABLED"] = "false"

# Clear the settings cache to pick up the new environment variable
from interestchat.settings import get_settings

get_settings.cache_clear()

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from interestchat.chat.service import ChatService  # noqa: E402
from interestchat.main import app  # noqa: E402
from interestchat.ws.chat_handler import chat_connection_registry  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_chat_state() -> ChatService:
    """Give every test an empty chat service and connection registry."""
    service = ChatService()
    app.state.chat_service = service
    chat_connection_registry.connections.clear()
    return service


@pytest.fixture
async def client() -> AsyncClient:
    """Create an async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
