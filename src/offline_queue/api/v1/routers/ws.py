from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from offline_queue.config import settings
from offline_queue.infrastructure.ws.manager import ConnectionManager
from offline_queue.infrastructure.ws.protocol import WsInbound, WsOutbound

logger = logging.getLogger(__name__)
router = APIRouter(tags=["websocket"])


def get_manager(ws: WebSocket) -> ConnectionManager:
    return ws.app.state.ws_manager


@router.websocket("/ws/queue")
async def ws_queue(websocket: WebSocket) -> None:
    manager = get_manager(websocket)
    outbox = await manager.connect(websocket)

    # all writes go through the send loop so frames never interleave
    tasks = [
        asyncio.create_task(_send_loop(websocket, outbox), name="ws-queue-send"),
        asyncio.create_task(_heartbeat(outbox), name="ws-queue-heartbeat"),
    ]
    try:
        await _read_loop(websocket, outbox)
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WS error on queue stream")
    finally:
        for task in tasks:
            task.cancel()
        manager.disconnect(websocket)


async def _send_loop(ws: WebSocket, outbox: asyncio.Queue[WsOutbound]) -> None:
    try:
        while True:
            message = await outbox.get()
            await ws.send_text(message.model_dump_json())
    except asyncio.CancelledError:
        pass
    except Exception:
        logger.debug("WS send failed", exc_info=True)


async def _heartbeat(outbox: asyncio.Queue[WsOutbound]) -> None:
    interval = settings.WS_HEARTBEAT_SECONDS
    try:
        while True:
            await asyncio.sleep(interval)
            outbox.put_nowait(WsOutbound(type="pong", data={}))
    except asyncio.CancelledError:
        pass


async def _read_loop(ws: WebSocket, outbox: asyncio.Queue[WsOutbound]) -> None:
    while True:
        raw = await ws.receive_text()
        try:
            msg = WsInbound.model_validate_json(raw)
        except Exception:
            outbox.put_nowait(WsOutbound(type="error", data={"code": "invalid_payload"}))
            continue

        if msg.type == "ping":
            outbox.put_nowait(WsOutbound(type="pong", data={}))
        else:
            outbox.put_nowait(
                WsOutbound(type="error", data={"code": "unknown_type", "type": msg.type})
            )
