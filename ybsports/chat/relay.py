"""In-memory chat broadcast relay with a bounded message history."""

from __future__ import annotations

import logging
from collections import deque
from datetime import datetime, timezone

from fastapi import WebSocket
from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEFAULT_NICKNAME = "익명"
MAX_MESSAGE_LENGTH = 500


class ChatMessage(BaseModel):
    nickname: str
    message: str
    sent_at: str


def build_message(payload: object) -> ChatMessage | None:
    """Build a ChatMessage from an inbound event; None for blank messages."""

    if not isinstance(payload, dict):
        return None
    text = payload.get("message")
    if not isinstance(text, str) or not text.strip():
        return None
    nickname = payload.get("nickname")
    if not isinstance(nickname, str) or not nickname.strip():
        nickname = DEFAULT_NICKNAME
    return ChatMessage(
        nickname=nickname.strip()[:50],
        message=text.strip()[:MAX_MESSAGE_LENGTH],
        sent_at=datetime.now(timezone.utc).isoformat(),
    )


class ChatHistory:
    """Keeps the last *maxlen* messages; the oldest are dropped first."""

    def __init__(self, maxlen: int = 50) -> None:
        self._buffer: deque[ChatMessage] = deque(maxlen=maxlen)

    @property
    def maxlen(self) -> int:
        return self._buffer.maxlen or 0

    def push(self, message: ChatMessage) -> None:
        self._buffer.append(message)

    def snapshot(self) -> list[dict]:
        """Return the buffered messages, oldest first."""
        return [message.model_dump() for message in self._buffer]

    def __len__(self) -> int:
        return len(self._buffer)


class ChatRelay:
    """Owns the connected sockets and the history buffer.

    The relay's own delivery loop is the only writer to the history.
    """

    def __init__(self, history_size: int = 50) -> None:
        self.history = ChatHistory(maxlen=history_size)
        self._connections: set[WebSocket] = set()

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._connections.add(websocket)
        logger.info("Chat client connected total=%s", len(self._connections))
        await websocket.send_json({"type": "history", "messages": self.history.snapshot()})

    def disconnect(self, websocket: WebSocket) -> None:
        self._connections.discard(websocket)
        logger.info("Chat client disconnected total=%s", len(self._connections))

    async def broadcast(self, message: ChatMessage) -> None:
        self.history.push(message)
        event = {"type": "message", **message.model_dump()}
        stale: list[WebSocket] = []
        for websocket in list(self._connections):
            try:
                await websocket.send_json(event)
            except Exception:
                logger.warning("Dropping chat client after failed send.", exc_info=True)
                stale.append(websocket)
        for websocket in stale:
            self._connections.discard(websocket)
