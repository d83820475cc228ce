"""em_market REST endpoints (all read-only, one ledger session per request).

GET /getOrderBook                     — {buy, sell}
GET /getTradeHistory                  — trades, newest first, display timestamps
GET /getRecentTrades?limit=N          — newest N trades
GET /getCurrentPrice                  — latest price + 24h change
GET /getMarketState                   — ledger snapshot, pass-through
GET /getMarketStatistics              — ledger statistics, pass-through
GET /getMarketOverview                — statistics + distributions derived by the gateway
GET /getProducerDetails/{producerId}  — pass-through
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Request

from src.em_common.validation import require_id
from src.em_ledger.application.dependencies import get_session_manager
from src.em_ledger.application.session import LedgerSessionManager
from src.em_market.application.schemas import (
    CurrentPriceResponse,
    MarketOverviewResponse,
    NoTradesResponse,
    OrderBookResponse,
    TradeOut,
)
from src.em_market.application.service import MarketApplicationService

router = APIRouter(tags=["market"])


def get_market_service(
    request: Request,
    sessions: Annotated[LedgerSessionManager, Depends(get_session_manager)],
) -> MarketApplicationService:
    return MarketApplicationService(
        sessions, timestamp_format=request.app.state.settings.TRADE_TIMESTAMP_FORMAT
    )


MarketService = Annotated[MarketApplicationService, Depends(get_market_service)]


@router.get("/getOrderBook", response_model=OrderBookResponse)
async def get_order_book(svc: MarketService) -> OrderBookResponse:
    return await svc.get_order_book()


@router.get("/getTradeHistory", response_model=list[TradeOut])
async def get_trade_history(svc: MarketService) -> list[TradeOut]:
    return await svc.get_trade_history()


@router.get("/getRecentTrades", response_model=list[TradeOut])
async def get_recent_trades(
    svc: MarketService,
    limit: int = Query(10, ge=1, le=500, description="Number of most recent trades"),
) -> list[TradeOut]:
    return await svc.get_recent_trades(limit)


@router.get("/getCurrentPrice", response_model=CurrentPriceResponse | NoTradesResponse)
async def get_current_price(svc: MarketService) -> CurrentPriceResponse | NoTradesResponse:
    return await svc.get_current_price()


@router.get("/getMarketState")
async def get_market_state(svc: MarketService) -> Any:
    return await svc.get_market_state()


@router.get("/getMarketStatistics")
async def get_market_statistics(svc: MarketService) -> Any:
    return await svc.get_market_statistics()


@router.get("/getMarketOverview", response_model=MarketOverviewResponse)
async def get_market_overview(svc: MarketService) -> MarketOverviewResponse:
    return await svc.get_market_overview()


@router.get("/getProducerDetails/{producerId}")
async def get_producer_details(producerId: str, svc: MarketService) -> Any:  # noqa: N803
    return await svc.get_producer_details(require_id(producerId, "producerId"))
