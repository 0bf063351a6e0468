"""WebSocket connections for the real-time notification channel.

Domain event handlers are synchronous and may run on the socket's own event
loop (an async route processing the webhook) or on another thread. Either
way a send is scheduled onto the socket's loop and never awaited, so the
handler does not block on the buyer's connection.
"""

import asyncio

import structlog
from fastapi import WebSocket

logger = structlog.get_logger(__name__)


class WebSocketConnection:
    def __init__(self, websocket: WebSocket, loop: asyncio.AbstractEventLoop) -> None:
        self.websocket = websocket
        self.loop = loop

    def send(self, message: dict) -> None:
        future = asyncio.run_coroutine_threadsafe(self.websocket.send_json(message), self.loop)
        future.add_done_callback(self._log_failure)

    @staticmethod
    def _log_failure(future) -> None:
        if not future.cancelled() and future.exception() is not None:
            logger.warning("websocket.send_failed", error=str(future.exception()))
