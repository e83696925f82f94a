"""FastAPI dependencies shared by HTTP and WebSocket endpoints."""

from fastapi.requests import HTTPConnection

from interestchat.chat.service import ChatService


def get_chat_service(connection: HTTPConnection) -> ChatService:
    """Get the chat service owned by the application."""
    return connection.app.state.chat_service
