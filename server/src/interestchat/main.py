"""FastAPI application entry point."""

import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from interestchat.api.rate_limit import limiter
from interestchat.api.router import api_router
from interestchat.chat.service import ChatService
from interestchat.dependencies import get_chat_service
from interestchat.settings import get_settings
from interestchat.ws.chat_handler import handle_chat_websocket

VERSION = "0.1.0"


def setup_logging() -> None:
    """Configure logging for the application."""
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Set specific loggers
    level = logging.DEBUG if get_settings().dev_mode else logging.INFO
    logging.getLogger("interestchat").setLevel(level)
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)


# Set up logging on import
setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()
    logger.info(f"Starting interest chat server (dev_mode={settings.dev_mode})")

    yield

    # Waiting pool and rooms are in memory only and vanish here
    stats = app.state.chat_service.stats()
    logger.info(
        f"Shutting down interest chat server "
        f"({stats['waiting']} waiting, {stats['rooms']} active rooms dropped)"
    )


app = FastAPI(
    title="Interest Chat",
    description="Anonymous one-to-one chat between people who share an interest",
    version=VERSION,
    lifespan=lifespan,
)

settings = get_settings()
app.state.chat_service = ChatService(system_name=settings.system_display_name)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Interest Chat API", "version": VERSION}


# Include API routers
app.include_router(api_router, prefix="/api")


# WebSocket endpoint for matchmaking and chat
@app.websocket("/ws/chat")
async def chat_websocket_endpoint(
    websocket: WebSocket,
    service: ChatService = Depends(get_chat_service),
) -> None:
    """WebSocket endpoint for matchmaking and room chat."""
    await handle_chat_websocket(websocket, service)
