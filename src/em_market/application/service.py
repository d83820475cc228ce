"""MarketApplicationService — read-only market views over the ledger.

Every method opens its own ledger session (via LedgerSessionManager),
evaluates one or more queries inside it, and shapes the result through the
read model. Nothing is cached between calls.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any

from src.em_common.datetime_utils import utc_now
from src.em_common.enums import LedgerTx
from src.em_common.errors import LedgerResponseError
from src.em_common.json_codec import decode_ledger_json
from src.em_ledger.application.session import LedgerSessionManager, TimedContract
from src.em_market.application.schemas import (
    CurrentPriceResponse,
    DistributionOut,
    MarketOverviewResponse,
    MarketStatisticsOut,
    NoTradesResponse,
    OrderBookResponse,
    TradeOut,
)
from src.em_market.domain import read_model
from src.em_market.domain.models import MarketState, Trade

DEFAULT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


async def fetch_order_book(contract: TimedContract) -> OrderBookResponse:
    """Shared by the REST endpoint and the broadcast loop."""
    tx = LedgerTx.GET_ORDER_BOOK
    raw = decode_ledger_json(tx.value, await contract.evaluate(tx))
    try:
        return OrderBookResponse.from_ledger(raw)
    except ValueError as exc:
        raise LedgerResponseError(tx.value, str(exc)) from None


async def fetch_trades(
    contract: TimedContract, tx: LedgerTx = LedgerTx.GET_TRADE_HISTORY, *args: str
) -> list[Trade]:
    raw = decode_ledger_json(tx.value, await contract.evaluate(tx, *args))
    try:
        return read_model.parse_trades(raw)
    except ValueError as exc:
        raise LedgerResponseError(tx.value, str(exc)) from None


async def fetch_market_state(contract: TimedContract) -> MarketState:
    tx = LedgerTx.GET_MARKET_STATE
    raw = decode_ledger_json(tx.value, await contract.evaluate(tx))
    try:
        return read_model.parse_market_state(raw)
    except ValueError as exc:
        raise LedgerResponseError(tx.value, str(exc)) from None


class MarketApplicationService:
    def __init__(
        self,
        sessions: LedgerSessionManager,
        timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._sessions = sessions
        self._timestamp_format = timestamp_format
        self._clock = clock

    def _format(self, trades: list[Trade]) -> list[TradeOut]:
        return [TradeOut.from_domain(t, self._timestamp_format) for t in trades]

    async def _evaluate_json(self, tx: LedgerTx, *args: str) -> Any:
        return decode_ledger_json(tx.value, await self._sessions.evaluate(tx, *args))

    async def get_order_book(self) -> OrderBookResponse:
        return await self._sessions.with_session(fetch_order_book)

    async def get_trade_history(self) -> list[TradeOut]:
        trades = await self._sessions.with_session(fetch_trades)
        return self._format(read_model.newest_first(trades))

    async def get_recent_trades(self, limit: int) -> list[TradeOut]:
        trades = await self._sessions.with_session(fetch_trades)
        return self._format(read_model.recent_trades(trades, limit))

    async def get_current_price(self) -> CurrentPriceResponse | NoTradesResponse:
        trades = await self._sessions.with_session(fetch_trades)
        snapshot = read_model.current_price(trades, self._clock())
        if snapshot is None:
            return NoTradesResponse()
        return CurrentPriceResponse.from_snapshot(snapshot)

    async def get_market_state(self) -> Any:
        return await self._evaluate_json(LedgerTx.GET_MARKET_STATE)

    async def get_market_statistics(self) -> Any:
        return await self._evaluate_json(LedgerTx.GET_MARKET_STATISTICS)

    async def get_producer_details(self, producer_id: str) -> Any:
        return await self._evaluate_json(LedgerTx.GET_PRODUCER_DETAILS, producer_id)

    async def get_market_overview(self) -> MarketOverviewResponse:
        """Statistics and distributions derived from one state + trade-log read."""

        async def _read(contract: TimedContract) -> tuple[MarketState, list[Trade]]:
            state = await fetch_market_state(contract)
            trades = await fetch_trades(contract)
            return state, trades

        state, trades = await self._sessions.with_session(_read)
        stats = read_model.market_statistics(state, trades, self._clock())
        return MarketOverviewResponse(
            statistics=MarketStatisticsOut.from_domain(stats),
            producers=[DistributionOut.from_domain(p) for p in read_model.producer_distribution(state)],
            consumers=[DistributionOut.from_domain(c) for c in read_model.consumer_distribution(state)],
        )
