"""WebSocket /ws/orderbook — live order book push channel.

Server -> client messages:
    {"event": "orderBookUpdate", "data": {"buy": [...], "sell": [...]}}
    {"event": "error", "data": {"message": "...", "code": 3001}}

Client -> server messages are read only to detect disconnect. The sender pump
runs in a task group next to the receive loop; whichever side sees the client
go away cancels the other.
"""

import uuid

import anyio
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from src.em_broadcast.application.service import OrderBookBroadcaster
from src.em_broadcast.domain.registry import ClientStream

router = APIRouter(tags=["stream"])


async def _pump(ws: WebSocket, stream: ClientStream, scope: anyio.CancelScope) -> None:
    try:
        while True:
            event = await stream.queue.get()
            await ws.send_json(event)
    except WebSocketDisconnect:
        scope.cancel()


@router.websocket("/ws/orderbook")
async def order_book_stream(ws: WebSocket) -> None:
    broadcaster: OrderBookBroadcaster = ws.app.state.broadcaster
    await ws.accept()
    client_id = f"ws_{uuid.uuid4().hex[:12]}"
    stream = broadcaster.connect(client_id)
    try:
        async with anyio.create_task_group() as tg:
            tg.start_soon(_pump, ws, stream, tg.cancel_scope)
            while True:
                message = await ws.receive()
                if message["type"] == "websocket.disconnect":
                    break
            tg.cancel_scope.cancel()
    finally:
        broadcaster.disconnect(client_id)
