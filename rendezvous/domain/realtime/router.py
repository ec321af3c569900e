"""Realtime router - websocket endpoint that registers live channels"""

import asyncio
import logging

from fastapi import APIRouter, Query, WebSocket, status

from ...auth import resolve_party
from ...database import SessionLocal
from ...errors import DomainError
from .registry import WebSocketChannel, session_registry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Realtime"])


def authenticate_socket(token: str) -> str:
    db = SessionLocal()
    try:
        return resolve_party(db, token).id
    finally:
        db.close()


@router.websocket("/ws")
async def realtime_channel(websocket: WebSocket, token: str = Query(...)):
    """
    Live notification channel.
    The channel is registered for the authenticated party on connect and
    unregistered when the socket goes away. Incoming frames, text or binary,
    are ignored.
    """
    try:
        party_id = authenticate_socket(token)
    except DomainError as e:
        logger.warning(f"⚠️ Rejected websocket connection: {e}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    channel = WebSocketChannel(websocket, asyncio.get_running_loop())
    # Registered before accept so the party is reachable once the handshake completes
    session_registry.register(party_id, channel)
    try:
        await websocket.accept()
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    finally:
        session_registry.unregister(channel)
