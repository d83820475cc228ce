# tests/unit/test_broadcaster.py
"""OrderBookBroadcaster: per-client polling tasks against the fake ledger."""
import asyncio
import json

import pytest
from fakes import FakeLedger, make_sessions

from src.em_broadcast.application.service import OrderBookBroadcaster
from src.em_broadcast.domain.registry import ClientRegistry, ClientStream
from src.em_common.errors import LedgerConnectionError

INTERVAL = 0.05
BOOK = {
    "buy": [{"userId": "c1", "price": 11, "quantity": 2, "orderType": "buy",
             "timestamp": "2026-10-19T08:00:00Z", "producerId": ""}],
    "sell": [],
}


@pytest.fixture
def ledger() -> FakeLedger:
    ledger = FakeLedger()
    ledger.set_json("GetOrderBook", BOOK)
    return ledger


@pytest.fixture
async def broadcaster(ledger):
    b = OrderBookBroadcaster(make_sessions(ledger), interval_seconds=INTERVAL)
    yield b
    await b.close()


async def _next(stream: ClientStream, timeout: float = 1.0) -> dict:
    return await asyncio.wait_for(stream.queue.get(), timeout)


class TestEmission:
    async def test_first_update_is_immediate(self, ledger) -> None:
        # interval far longer than the wait: only an immediate first read can arrive
        broadcaster = OrderBookBroadcaster(make_sessions(ledger), interval_seconds=60)
        stream = broadcaster.connect("a")
        try:
            event = await _next(stream)
        finally:
            await broadcaster.close()

        assert event["event"] == "orderBookUpdate"
        assert event["data"]["buy"][0]["userId"] == "c1"
        assert event["data"]["buy"][0]["price"] == 11
        assert event["data"]["sell"] == []

    async def test_keeps_polling_every_interval(self, broadcaster, ledger) -> None:
        stream = broadcaster.connect("a")
        events = [await _next(stream) for _ in range(3)]

        assert all(e["event"] == "orderBookUpdate" for e in events)
        assert len(ledger.calls_to("GetOrderBook")) >= 3

    async def test_every_tick_releases_its_handle(self, broadcaster, ledger) -> None:
        stream = broadcaster.connect("a")
        for _ in range(3):
            await _next(stream)
        broadcaster.disconnect("a")
        await asyncio.wait_for(stream.task, 1.0)

        assert ledger.acquired == ledger.released

    async def test_error_event_then_recovery(self, broadcaster, ledger) -> None:
        attempts = {"n": 0}

        def flaky(*args: str) -> bytes:
            attempts["n"] += 1
            if attempts["n"] == 1:
                raise LedgerConnectionError("peer unavailable")
            return json.dumps(BOOK).encode()

        ledger.set_handler("GetOrderBook", flaky)
        stream = broadcaster.connect("a")

        first = await _next(stream)
        second = await _next(stream)

        assert first == {
            "event": "error",
            "data": {"message": "Failed to fetch order book", "code": 2002},
        }
        assert second["event"] == "orderBookUpdate"
        assert not stream.task.done()

    async def test_undecodable_book_reported_as_error(self, broadcaster, ledger) -> None:
        ledger.set_raw("GetOrderBook", b"<html>bad gateway</html>")
        stream = broadcaster.connect("a")

        event = await _next(stream)

        assert event["event"] == "error"
        assert event["data"]["code"] == 3003


class TestDisconnect:
    async def test_disconnect_stops_polling(self, broadcaster, ledger) -> None:
        stream = broadcaster.connect("a")
        await _next(stream)

        broadcaster.disconnect("a")
        await asyncio.wait_for(stream.task, INTERVAL * 4)
        calls_after_stop = len(ledger.calls_to("GetOrderBook"))
        await asyncio.sleep(INTERVAL * 4)

        assert len(ledger.calls_to("GetOrderBook")) == calls_after_stop
        assert "a" not in broadcaster.registry

    async def test_in_flight_read_completes_and_is_dropped(self, broadcaster, ledger) -> None:
        ledger.delay = INTERVAL * 2
        stream = broadcaster.connect("a")
        await asyncio.sleep(INTERVAL / 2)  # read is now in flight

        broadcaster.disconnect("a")
        await asyncio.wait_for(stream.task, 1.0)

        assert stream.queue.empty()
        assert len(ledger.calls_to("GetOrderBook")) == 1
        assert (ledger.acquired, ledger.released) == (1, 1)

    async def test_disconnect_unknown_client_is_noop(self, broadcaster) -> None:
        broadcaster.disconnect("ghost")
        assert len(broadcaster.registry) == 0


class TestIndependence:
    async def test_other_clients_unaffected_by_disconnect(self, broadcaster) -> None:
        a = broadcaster.connect("a")
        b = broadcaster.connect("b")
        await _next(a)
        await _next(b)

        broadcaster.disconnect("a")
        await asyncio.wait_for(a.task, 1.0)

        # b keeps receiving fresh updates
        for _ in range(2):
            assert (await _next(b))["event"] == "orderBookUpdate"
        assert not b.task.done()
        assert broadcaster.registry.client_ids() == ["b"]

    async def test_slow_client_does_not_block_its_loop(self, ledger) -> None:
        broadcaster = OrderBookBroadcaster(make_sessions(ledger), interval_seconds=0.01, queue_size=2)
        stream = broadcaster.connect("slow")
        try:
            await asyncio.sleep(0.15)  # nobody drains the queue
            assert stream.queue.qsize() == 2
            assert len(ledger.calls_to("GetOrderBook")) > 2
        finally:
            await broadcaster.close()

    async def test_close_stops_every_client(self, broadcaster) -> None:
        streams = [broadcaster.connect(cid) for cid in ("a", "b", "c")]
        await broadcaster.close()

        assert all(s.task.done() for s in streams)
        assert len(broadcaster.registry) == 0


class TestRegistry:
    def test_duplicate_client_rejected(self) -> None:
        registry = ClientRegistry()
        registry.add(ClientStream(client_id="a", queue=asyncio.Queue()))
        with pytest.raises(ValueError):
            registry.add(ClientStream(client_id="a", queue=asyncio.Queue()))

    async def test_offer_sheds_oldest_when_full(self) -> None:
        stream = ClientStream(client_id="a", queue=asyncio.Queue(maxsize=2))
        for i in range(4):
            stream.offer({"n": i})

        assert [stream.queue.get_nowait()["n"] for _ in range(2)] == [2, 3]

    async def test_offer_after_stop_is_dropped(self) -> None:
        stream = ClientStream(client_id="a", queue=asyncio.Queue())
        stream.stop.set()
        stream.offer({"n": 1})
        assert stream.queue.empty()
