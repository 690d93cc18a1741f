"""In-process WebSocket connection manager."""
from __future__ import annotations

import logging
from typing import Any

from fastapi import WebSocket

from sign_quran_messaging.application.dto.principal import principal_key_for
from sign_quran_messaging.infrastructure.ws.protocol import WsOutbound

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks WebSocket connections per user; a user may have several tabs open."""

    def __init__(self) -> None:
        self._connections: dict[str, set[WebSocket]] = {}

    async def connect(self, ws: WebSocket, principal_key: str) -> None:
        await ws.accept()
        self._connections.setdefault(principal_key, set()).add(ws)
        logger.debug("WS connected: %s (total=%d)", principal_key, len(self._connections))

    def disconnect(self, ws: WebSocket, principal_key: str) -> None:
        conns = self._connections.get(principal_key)
        if conns:
            conns.discard(ws)
            if not conns:
                del self._connections[principal_key]
        logger.debug("WS disconnected: %s", principal_key)

    def is_connected(self, principal_key: str) -> bool:
        return principal_key in self._connections

    async def send_to_principal(
        self,
        principal_key: str,
        event_type: str,
        data: dict[str, Any],
    ) -> None:
        """Send a WS message to every connection of a specific principal."""
        raw = WsOutbound(type=event_type, data=data).model_dump_json()
        dead: list[WebSocket] = []
        for ws in list(self._connections.get(principal_key, set())):
            try:
                await ws.send_text(raw)
            except Exception:
                logger.debug("WS send failed for %s", principal_key, exc_info=True)
                dead.append(ws)
        for ws in dead:
            self.disconnect(ws, principal_key)

    async def send_to_users(
        self,
        user_ids: list[int],
        event_type: str,
        data: dict[str, Any],
    ) -> None:
        for user_id in dict.fromkeys(user_ids):
            await self.send_to_principal(principal_key_for(user_id), event_type, data)
