from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, HTTPException, Query, WebSocket, WebSocketDisconnect

from sign_quran_messaging.api.deps import authenticate
from sign_quran_messaging.application.dto.principal import Principal
from sign_quran_messaging.config import settings
from sign_quran_messaging.infrastructure.ws.manager import ConnectionManager
from sign_quran_messaging.infrastructure.ws.protocol import WsInbound, WsOutbound

logger = logging.getLogger(__name__)
router = APIRouter(tags=["websocket"])

manager = ConnectionManager()


def get_manager() -> ConnectionManager:
    return manager


async def _authenticate(websocket: WebSocket, token: str | None) -> Principal | None:
    token = token or websocket.cookies.get(settings.AUTH_COOKIE_NAME)
    if not token:
        return None
    try:
        return await authenticate(token)
    except HTTPException:
        logger.debug("WS auth failed", exc_info=True)
        return None


@router.websocket("/api/messages/ws")
async def ws_messages(
    websocket: WebSocket,
    token: str | None = Query(None),
) -> None:
    """Push channel for message.created / message.read events of the caller."""
    principal = await _authenticate(websocket, token)
    if principal is None:
        await websocket.close(code=4001, reason="Authentication failed")
        return

    pkey = principal.principal_key
    await manager.connect(websocket, pkey)

    heartbeat_task = asyncio.create_task(
        _heartbeat(websocket), name=f"ws-heartbeat-{pkey}",
    )
    try:
        await _read_loop(websocket)
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WS error for %s", pkey)
    finally:
        heartbeat_task.cancel()
        manager.disconnect(websocket, pkey)


async def _heartbeat(ws: WebSocket) -> None:
    interval = settings.WS_HEARTBEAT_SECONDS
    try:
        while True:
            await asyncio.sleep(interval)
            await ws.send_text(WsOutbound(type="pong", data={}).model_dump_json())
    except asyncio.CancelledError:
        pass
    except Exception:
        logger.debug("WS heartbeat stopped", exc_info=True)


async def _read_loop(ws: WebSocket) -> None:
    # Writes go through REST; the socket only carries keep-alives inbound
    while True:
        raw = await ws.receive_text()
        try:
            msg = WsInbound.model_validate_json(raw)
        except ValueError:
            await ws.send_text(
                WsOutbound(type="error", data={"code": "invalid_payload"}).model_dump_json()
            )
            continue

        if msg.type == "ping":
            await ws.send_text(WsOutbound(type="pong", data={}).model_dump_json())
        else:
            await ws.send_text(
                WsOutbound(type="error", data={"code": "unknown_type", "type": msg.type}).model_dump_json()
            )
