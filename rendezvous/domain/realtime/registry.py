"""
Session Registry - maps a party to its single live real-time channel.

A later registration for the same party silently replaces the earlier one,
so reconnecting clients never need to unregister first.
"""

import asyncio
import logging
from threading import Lock
from typing import Any, Optional, Protocol

logger = logging.getLogger(__name__)


class Channel(Protocol):
    """Push destination for one connected client. ``push`` must never block."""

    def push(self, event: str, data: Any) -> None: ...


class WebSocketChannel:
    """Channel backed by a Starlette/FastAPI websocket"""

    def __init__(self, websocket, loop: asyncio.AbstractEventLoop):
        self.websocket = websocket
        self.loop = loop

    def push(self, event: str, data: Any) -> None:
        # Scheduled on the socket's own loop so callers on any thread return at once
        future = asyncio.run_coroutine_threadsafe(
            self.websocket.send_json({"event": event, "data": data}), self.loop
        )
        future.add_done_callback(self._log_failure)

    @staticmethod
    def _log_failure(future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.warning(f"⚠️ Live push failed: {error}")


class SessionRegistry:
    """Thread-safe party -> channel map"""

    def __init__(self):
        self._channels: dict[str, Channel] = {}
        self._lock = Lock()

    def register(self, party_id: str, channel: Channel) -> None:
        with self._lock:
            self._channels[party_id] = channel
        logger.info(f"📡 Party {party_id} connected")

    def unregister(self, channel: Channel) -> Optional[str]:
        """Remove whichever party currently owns ``channel``. Returns that party, if any."""
        with self._lock:
            for party_id, owned in self._channels.items():
                if owned is channel:
                    del self._channels[party_id]
                    break
            else:
                return None
        logger.info(f"🔌 Party {party_id} disconnected")
        return party_id

    def lookup(self, party_id: str) -> Optional[Channel]:
        with self._lock:
            return self._channels.get(party_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._channels)


# Global registry shared by every request handled in this worker
session_registry = SessionRegistry()
