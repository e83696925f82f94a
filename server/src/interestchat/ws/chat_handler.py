"""WebSocket handler for interest chat."""

import asyncio
import json
import logging

from fastapi import WebSocket

from interestchat.chat.models import ChatError, Connection
from interestchat.chat.service import ChatService
from interestchat.ws.protocol import (
    ChatMessageIn,
    ClientMessage,
    ErrorMessage,
    JoinMessage,
    LeaveRoomMessage,
    PingMessage,
    PongMessage,
    parse_client_message,
)

logger = logging.getLogger(__name__)


class ChatConnectionRegistry:
    """Tracks live chat connections by id.

    The registry belongs to the transport: it knows which sockets are open,
    while ChatService knows what each connection is doing.
    """

    def __init__(self) -> None:
        """Initialize the registry."""
        self.connections: dict[str, Connection] = {}
        self._lock = asyncio.Lock()

    async def register(self, connection: Connection) -> None:
        async with self._lock:
            self.connections[connection.id] = connection
        logger.info(f"Chat connection {connection.id} opened")

    async def unregister(self, connection: Connection) -> bool:
        """Forget a connection.

        Returns:
            True if the connection was registered
        """
        async with self._lock:
            removed = self.connections.pop(connection.id, None) is not None
        if removed:
            logger.info(f"Chat connection {connection.id} closed")
        return removed

    def __len__(self) -> int:
        return len(self.connections)


# Global connection registry instance
chat_connection_registry = ChatConnectionRegistry()


def _error(connection: Connection, error: ChatError) -> None:
    connection.deliver(ErrorMessage(code=error.code, message=error.message).model_dump())


async def _pump_outbox(websocket: WebSocket, connection: Connection) -> None:
    """Write queued messages to the socket in the order they were queued."""
    while True:
        message = await connection.outbox.get()
        await websocket.send_text(json.dumps(message))


async def handle_chat_websocket(websocket: WebSocket, service: ChatService) -> None:
    """Handle a WebSocket connection for interest chat.

    Args:
        websocket: The WebSocket connection
        service: Chat service holding the waiting pool and rooms
    """
    await websocket.accept()

    connection = Connection()
    await chat_connection_registry.register(connection)
    writer = asyncio.create_task(_pump_outbox(websocket, connection))

    try:
        while True:
            # Receive message
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                break

            data = frame.get("text")
            if data is None:
                _error(
                    connection,
                    ChatError(code="invalid_message", message="Only text frames are supported"),
                )
                continue

            # Parse message
            try:
                msg_data = json.loads(data)
            except json.JSONDecodeError:
                _error(connection, ChatError(code="invalid_json", message="Invalid JSON"))
                continue

            message = parse_client_message(msg_data)
            if isinstance(message, ChatError):
                logger.warning(f"Rejected message from {connection.id}: {message.message}")
                _error(connection, message)
                continue

            await _handle_message(service, connection, message)

    except Exception as e:
        logger.exception(f"Error in chat WebSocket handler for {connection.id}: {e}")
    finally:
        await service.disconnect(connection)
        await chat_connection_registry.unregister(connection)
        writer.cancel()
        (outcome,) = await asyncio.gather(writer, return_exceptions=True)
        if isinstance(outcome, Exception):
            logger.warning(f"Outbox writer for {connection.id} stopped with error: {outcome}")


async def _handle_message(
    service: ChatService,
    connection: Connection,
    message: ClientMessage,
) -> None:
    """Dispatch a parsed client message.

    Args:
        service: Chat service
        connection: The sending connection
        message: The parsed message
    """
    if isinstance(message, PingMessage):
        connection.deliver(PongMessage().model_dump())

    elif isinstance(message, JoinMessage):
        await service.join(message.username, message.interest, connection)

    elif isinstance(message, ChatMessageIn):
        await service.relay(message.room, connection, message.message)

    elif isinstance(message, LeaveRoomMessage):
        await service.leave(message.room, connection)
