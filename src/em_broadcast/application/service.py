"""OrderBookBroadcaster — live order book push, one polling task per client.

Per connected client:
    connect     -> register stream, start task (first read is immediate)
    every tick  -> new ledger session, evaluate GetOrderBook, push event, release
    ledger fail -> push an error event, keep ticking
    disconnect  -> stop flag set; an in-flight read finishes and is dropped,
                   no further ledger calls are made for that client

Clients never share a poll or a buffer: a slow or failing client only
affects its own stream.
"""

import asyncio
import logging
from typing import Any

from src.em_broadcast.domain.registry import ClientRegistry, ClientStream
from src.em_common.enums import StreamEvent
from src.em_common.errors import AppError
from src.em_ledger.application.session import LedgerSessionManager
from src.em_market.application.service import fetch_order_book

logger = logging.getLogger("em.broadcast")

FETCH_FAILED_MESSAGE = "Failed to fetch order book"


def order_book_event(book: dict[str, Any]) -> dict[str, Any]:
    return {"event": StreamEvent.ORDER_BOOK_UPDATE.value, "data": book}


def error_event(message: str, code: int | None = None) -> dict[str, Any]:
    data: dict[str, Any] = {"message": message}
    if code is not None:
        data["code"] = code
    return {"event": StreamEvent.ERROR.value, "data": data}


class OrderBookBroadcaster:
    def __init__(
        self,
        sessions: LedgerSessionManager,
        interval_seconds: float = 5.0,
        queue_size: int = 8,
    ) -> None:
        self._sessions = sessions
        self._interval = interval_seconds
        self._queue_size = queue_size
        self._registry = ClientRegistry()

    @property
    def registry(self) -> ClientRegistry:
        return self._registry

    def connect(self, client_id: str) -> ClientStream:
        """Register a client and start its polling task. Must run inside the event loop."""
        stream = ClientStream(client_id=client_id, queue=asyncio.Queue(maxsize=self._queue_size))
        self._registry.add(stream)
        stream.task = asyncio.create_task(self._run(stream), name=f"orderbook:{client_id}")
        logger.info("Client connected: %s (%d active)", client_id, len(self._registry))
        return stream

    def disconnect(self, client_id: str) -> None:
        stream = self._registry.remove(client_id)
        if stream is None:
            return
        stream.stop.set()
        logger.info("Client disconnected: %s (%d active)", client_id, len(self._registry))

    async def close(self) -> None:
        """Stop every client task (application shutdown)."""
        streams = [self._registry.remove(cid) for cid in self._registry.client_ids()]
        tasks = []
        for stream in streams:
            if stream is None:
                continue
            stream.stop.set()
            if stream.task is not None:
                stream.task.cancel()
                tasks.append(stream.task)
        await asyncio.gather(*tasks, return_exceptions=True)

    async def _tick(self, client_id: str) -> dict[str, Any]:
        try:
            book = await self._sessions.with_session(fetch_order_book)
        except AppError as exc:
            logger.warning("Order book read failed for %s: %s", client_id, exc.message)
            return error_event(FETCH_FAILED_MESSAGE, exc.code)
        except Exception:
            logger.exception("Unexpected error in order book loop for %s", client_id)
            return error_event(FETCH_FAILED_MESSAGE)
        return order_book_event(book.model_dump(mode="json", by_alias=True))

    async def _run(self, stream: ClientStream) -> None:
        while not stream.stop.is_set():
            event = await self._tick(stream.client_id)
            if stream.stop.is_set():
                break
            stream.offer(event)
            try:
                await asyncio.wait_for(stream.stop.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                pass
