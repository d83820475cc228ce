"""Pydantic schemas for market read endpoints.

Decimals from the read model are rendered as JSON numbers (float) for the
browser client; ledger pass-through bodies are returned as decoded.
"""

from datetime import datetime
from typing import Any

from pydantic import ConfigDict, Field

from src.em_common.datetime_utils import format_display
from src.em_common.schemas import CamelModel
from src.em_market.domain.models import (
    DistributionPoint,
    MarketStatistics,
    PriceSnapshot,
    Trade,
)

NO_TRADES_MESSAGE = "No trades available"

# ---------------------------------------------------------------------------
# Order book
# ---------------------------------------------------------------------------


class OrderOut(CamelModel):
    """One resting order as stored by the contract; unknown fields pass through."""

    model_config = ConfigDict(extra="allow")

    user_id: str = ""
    price: float = 0.0
    quantity: float = 0.0
    order_type: str = ""
    timestamp: str = ""
    producer_id: str = ""


class OrderBookResponse(CamelModel):
    buy: list[OrderOut]
    sell: list[OrderOut]

    @classmethod
    def from_ledger(cls, raw: Any) -> "OrderBookResponse":
        """Tolerates ``null`` sides (empty book) from the contract."""
        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ValueError(f"Expected an order book object, got {type(raw).__name__}")
        return cls(buy=raw.get("buy") or [], sell=raw.get("sell") or [])


# ---------------------------------------------------------------------------
# Trades
# ---------------------------------------------------------------------------


class TradeOut(CamelModel):
    buyer_id: str
    seller_id: str
    producer_id: str
    price: float
    quantity: float
    total_value: float
    timestamp: str

    @classmethod
    def from_domain(cls, t: Trade, timestamp_format: str) -> "TradeOut":
        return cls(
            buyer_id=t.buyer_id,
            seller_id=t.seller_id,
            producer_id=t.producer_id,
            price=float(t.price),
            quantity=float(t.quantity),
            total_value=float(t.total_value),
            timestamp=format_display(t.timestamp, timestamp_format),
        )


# ---------------------------------------------------------------------------
# Current price
# ---------------------------------------------------------------------------


class CurrentPriceResponse(CamelModel):
    current_price: float
    price_change: float
    last_trade_time: datetime

    @classmethod
    def from_snapshot(cls, s: PriceSnapshot) -> "CurrentPriceResponse":
        return cls(
            current_price=float(s.current_price),
            price_change=float(s.price_change),
            last_trade_time=s.last_trade_time,
        )


class NoTradesResponse(CamelModel):
    current_price: None = None
    message: str = NO_TRADES_MESSAGE


# ---------------------------------------------------------------------------
# Derived statistics (overview)
# ---------------------------------------------------------------------------


class MarketStatisticsOut(CamelModel):
    total_generation_capacity: float
    total_demand: float
    social_welfare: float
    # explicit aliases: to_camel() would render "24H"
    volume24h: float = Field(alias="volume24h")
    trade_count24h: int = Field(alias="tradeCount24h")
    average_price24h: float = Field(alias="averagePrice24h")
    current_price: float | None
    price_change24h: float = Field(alias="priceChange24h")
    producer_count: int
    consumer_count: int

    @classmethod
    def from_domain(cls, s: MarketStatistics) -> "MarketStatisticsOut":
        return cls(
            total_generation_capacity=float(s.total_generation_capacity),
            total_demand=float(s.total_demand),
            social_welfare=float(s.social_welfare),
            volume24h=float(s.volume_24h),
            trade_count24h=s.trade_count_24h,
            average_price24h=float(s.average_price_24h),
            current_price=float(s.current_price) if s.current_price is not None else None,
            price_change24h=float(s.price_change_24h),
            producer_count=s.producer_count,
            consumer_count=s.consumer_count,
        )


class DistributionOut(CamelModel):
    name: str
    value: float
    secondary: float

    @classmethod
    def from_domain(cls, p: DistributionPoint) -> "DistributionOut":
        return cls(name=p.name, value=float(p.value), secondary=float(p.secondary))


class MarketOverviewResponse(CamelModel):
    statistics: MarketStatisticsOut
    producers: list[DistributionOut]
    consumers: list[DistributionOut]
