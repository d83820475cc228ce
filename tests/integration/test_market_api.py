"""Market read endpoints: read model shaping over fresh ledger queries."""

from datetime import UTC, datetime, timedelta

from src.em_common.errors import LedgerConnectionError


def _ts(age: timedelta) -> str:
    return (datetime.now(UTC) - age).isoformat().replace("+00:00", "Z")


def _trade(price, quantity, age: timedelta, **kwargs) -> dict:
    trade = {
        "buyerId": "c1", "sellerId": "c2", "producerId": "p1",
        "price": price, "quantity": quantity, "totalValue": price * quantity,
        "timestamp": _ts(age),
    }
    trade.update(kwargs)
    return trade


class TestCurrentPrice:
    async def test_no_trades(self, client, ledger) -> None:
        ledger.set_json("GetTradeHistory", [])

        resp = await client.get("/api/getCurrentPrice")

        assert resp.status_code == 200
        assert resp.json() == {"currentPrice": None, "message": "No trades available"}

    async def test_null_trade_log_treated_as_empty(self, client, ledger) -> None:
        ledger.set_json("GetTradeHistory", None)

        resp = await client.get("/api/getCurrentPrice")

        assert resp.json()["currentPrice"] is None

    async def test_price_and_24h_change(self, client, ledger) -> None:
        ledger.set_json("GetTradeHistory", [
            _trade(8, 1, timedelta(hours=30)),
            _trade(10, 1, timedelta(hours=2)),
        ])

        body = (await client.get("/api/getCurrentPrice")).json()

        assert body["currentPrice"] == 10
        assert body["priceChange"] == 25.0
        assert "lastTradeTime" in body
        assert (ledger.acquired, ledger.released) == (1, 1)


class TestTradeHistory:
    async def test_formats_trades_newest_first(self, client, ledger) -> None:
        ledger.set_json("GetTradeHistory", [
            _trade(8, 2, timedelta(hours=30), buyerId="old"),
            _trade(10, 1.5, timedelta(hours=2), buyerId="new"),
        ])

        trades = (await client.get("/api/getTradeHistory")).json()

        assert [t["buyerId"] for t in trades] == ["new", "old"]
        assert trades[0]["totalValue"] == 15.0
        assert trades[1]["totalValue"] == 16.0
        # display string "YYYY-MM-DD HH:MM:SS"
        datetime.strptime(trades[0]["timestamp"], "%Y-%m-%d %H:%M:%S")

    async def test_recent_trades_limit(self, client, ledger) -> None:
        ledger.set_json("GetTradeHistory", [_trade(i, 1, timedelta(hours=i)) for i in range(1, 6)])

        trades = (await client.get("/api/getRecentTrades", params={"limit": 2})).json()

        assert [t["price"] for t in trades] == [1, 2]

    async def test_recent_trades_bad_limit(self, client, ledger) -> None:
        resp = await client.get("/api/getRecentTrades", params={"limit": 0})

        assert resp.status_code == 400
        assert ledger.calls == []


class TestOrderBook:
    async def test_pass_through(self, client, ledger) -> None:
        ledger.set_json("GetOrderBook", {
            "buy": [{"userId": "c1", "price": 12, "quantity": 3, "orderType": "buy",
                     "timestamp": "2026-10-19T08:00:00Z", "producerId": ""}],
            "sell": None,
        })

        body = (await client.get("/api/getOrderBook")).json()

        assert body["buy"][0]["userId"] == "c1"
        assert body["buy"][0]["price"] == 12
        assert body["sell"] == []

    async def test_undecodable_payload_is_502(self, client, ledger) -> None:
        ledger.set_raw("GetOrderBook", b"not json")

        resp = await client.get("/api/getOrderBook")

        assert resp.status_code == 502
        assert resp.json()["code"] == 3003

    async def test_connection_failure_is_503(self, client, ledger) -> None:
        ledger.connect_error = LedgerConnectionError("handshake failed (ConnectError)")

        resp = await client.get("/api/getOrderBook")

        assert resp.status_code == 503
        assert resp.json()["code"] == 2002


class TestMarketState:
    STATE = {
        "producers": [{"id": "p1", "ownerId": "c1", "production": 40, "cost": 120}],
        "consumers": [{"id": "c1", "totalDemand": 35, "balance": 900}],
        "totalGeneration": 40, "totalDemand": 35, "socialWelfare": 17.5,
        "iterationCount": 12, "converged": True,
    }

    async def test_market_state_pass_through(self, client, ledger) -> None:
        ledger.set_json("GetMarketState", self.STATE)

        assert (await client.get("/api/getMarketState")).json() == self.STATE

    async def test_market_statistics_pass_through(self, client, ledger) -> None:
        stats = {"totalGenerationCapacity": 40, "volume24h": 12.5, "tradeCount24h": 2}
        ledger.set_json("GetMarketStatistics", stats)

        assert (await client.get("/api/getMarketStatistics")).json() == stats

    async def test_overview_derived_in_one_session(self, client, ledger) -> None:
        ledger.set_json("GetMarketState", self.STATE)
        ledger.set_json("GetTradeHistory", [
            _trade(10, 2, timedelta(hours=1)),
            _trade(8, 1, timedelta(hours=30)),
        ])

        body = (await client.get("/api/getMarketOverview")).json()

        stats = body["statistics"]
        assert stats["totalGenerationCapacity"] == 40
        assert stats["socialWelfare"] == 17.5
        assert stats["volume24h"] == 20
        assert stats["tradeCount24h"] == 1
        assert stats["currentPrice"] == 10
        assert stats["priceChange24h"] == 25.0
        assert body["producers"] == [{"name": "p1", "value": 40, "secondary": 120}]
        assert body["consumers"] == [{"name": "c1", "value": 35, "secondary": 900}]
        assert (ledger.acquired, ledger.released) == (1, 1)

    async def test_overview_of_empty_market(self, client, ledger) -> None:
        body = (await client.get("/api/getMarketOverview")).json()

        assert body["producers"] == []
        assert body["consumers"] == []
        assert body["statistics"]["currentPrice"] is None

    async def test_producer_details(self, client, ledger) -> None:
        ledger.set_json("GetProducerDetails", {"id": "p1", "ownerId": "c1"})

        body = (await client.get("/api/getProducerDetails/p1")).json()

        assert body == {"id": "p1", "ownerId": "c1"}
        assert ledger.calls_to("GetProducerDetails") == [("p1",)]
