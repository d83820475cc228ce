"""Per-user read endpoints."""

from src.em_common.errors import IdentityNotFoundError, LedgerRejectedError


class TestBalances:
    async def test_get_balance_decodes_ledger_json(self, client, ledger) -> None:
        ledger.set_json("GetBalance", {"balance": 1250.5})

        resp = await client.get("/api/getBalance/c1")

        assert resp.json() == {"balance": 1250.5}
        assert ledger.calls == [("evaluate", "GetBalance", ("c1",))]

    async def test_get_user_balance_wraps_bare_number(self, client, ledger) -> None:
        ledger.set_raw("GetUserBalance", b"980.25")

        resp = await client.get("/api/getUserBalance/c1")

        assert resp.status_code == 200
        assert resp.json() == {"balance": 980.25}

    async def test_unknown_user_is_ledger_rejection(self, client, ledger) -> None:
        ledger.set_error("GetUserBalance", LedgerRejectedError("GetUserBalance", "user c9 not found"))

        resp = await client.get("/api/getUserBalance/c9")

        assert resp.status_code == 500
        assert "user c9 not found" in resp.json()["message"]

    async def test_blank_user_id_rejected(self, client, ledger) -> None:
        resp = await client.get("/api/getUserBalance/%20")

        assert resp.status_code == 400
        assert ledger.calls == []

    async def test_missing_identity(self, app, client, ledger) -> None:
        app.state.ledger_sessions._wallet.identity = None

        resp = await client.get("/api/getBalance/c1")

        assert resp.status_code == 500
        assert resp.json()["code"] == IdentityNotFoundError("appUser").code
        assert ledger.acquired == 0


class TestUserTrades:
    async def test_user_trades_formatted(self, client, ledger) -> None:
        ledger.set_json("GetUserTrades", [{
            "buyerId": "c1", "sellerId": "c2", "producerId": "p1", "price": 9,
            "quantity": 3, "totalValue": 27, "timestamp": "2026-10-18T10:15:00Z",
        }])

        trades = (await client.get("/api/getUserTrades/c1")).json()

        assert trades == [{
            "buyerId": "c1", "sellerId": "c2", "producerId": "p1", "price": 9.0,
            "quantity": 3.0, "totalValue": 27.0, "timestamp": "2026-10-18 10:15:00",
        }]
        assert ledger.calls_to("GetUserTrades") == [("c1",)]
