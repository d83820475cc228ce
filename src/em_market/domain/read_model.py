"""Market read model — pure transforms over raw ledger query results.

Nothing here performs I/O. Every time-dependent function takes ``now``
explicitly; results are a function of when they are computed.

Price change over 24h:
    current = price of the most recent trade
    old     = price of the most recent trade strictly older than now - 24h
    change  = (current - old) / old * 100, rounded to 2 dp
    change  = 0 when no such trade exists (or old price is 0)
"""

import logging
from collections.abc import Iterable
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from src.em_common.datetime_utils import parse_timestamp
from src.em_common.decimals import to_decimal
from src.em_market.domain.models import (
    Consumer,
    DistributionPoint,
    MarketState,
    MarketStatistics,
    PriceSnapshot,
    Producer,
    Trade,
)

logger = logging.getLogger("em.market")

DAY = timedelta(hours=24)
_ZERO = Decimal("0")
_TWO_DP = Decimal("0.01")


def _num(raw: dict[str, Any], key: str) -> Decimal:
    value = raw.get(key)
    if value is None:
        return _ZERO
    return to_decimal(value)


def _opt_num(raw: dict[str, Any], key: str) -> Decimal | None:
    value = raw.get(key)
    if value is None:
        return None
    return to_decimal(value)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_trade(raw: dict[str, Any]) -> Trade:
    """Build a Trade from one ledger record. Raises ValueError if malformed."""
    return Trade(
        buyer_id=str(raw.get("buyerId", "")),
        seller_id=str(raw.get("sellerId", "")),
        price=to_decimal(raw["price"]),
        quantity=to_decimal(raw["quantity"]),
        timestamp=parse_timestamp(raw["timestamp"]),
        producer_id=str(raw.get("producerId") or ""),
        transaction_id=str(raw.get("transactionId") or ""),
        block_height=int(raw.get("blockHeight") or 0),
    )


def parse_trades(raw: Any) -> list[Trade]:
    """Parse a ledger trade list. ``None`` (empty ledger) -> []. Bad records are skipped."""
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValueError(f"Expected a list of trades, got {type(raw).__name__}")
    trades: list[Trade] = []
    for item in raw:
        try:
            if not isinstance(item, dict):
                raise TypeError(type(item).__name__)
            trades.append(parse_trade(item))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping malformed trade record: %r (%s)", item, exc)
    return trades


def parse_market_state(raw: Any) -> MarketState:
    """Parse a ledger market-state snapshot. ``None`` -> empty market."""
    if raw is None:
        return MarketState()
    if not isinstance(raw, dict):
        raise ValueError(f"Expected a market state object, got {type(raw).__name__}")
    producers = [
        Producer(
            id=str(p.get("id", "")),
            owner_id=str(p.get("ownerId") or ""),
            production=_num(p, "production"),
            cost=_num(p, "cost"),
        )
        for p in raw.get("producers") or []
        if isinstance(p, dict)
    ]
    consumers = [
        Consumer(
            id=str(c.get("id", "")),
            total_demand=_num(c, "totalDemand"),
            balance=_num(c, "balance"),
        )
        for c in raw.get("consumers") or []
        if isinstance(c, dict)
    ]
    return MarketState(
        producers=producers,
        consumers=consumers,
        total_generation=_opt_num(raw, "totalGeneration"),
        total_demand=_opt_num(raw, "totalDemand"),
        social_welfare=_opt_num(raw, "socialWelfare"),
    )


# ---------------------------------------------------------------------------
# Price & activity
# ---------------------------------------------------------------------------


def newest_first(trades: Iterable[Trade]) -> list[Trade]:
    return sorted(trades, key=lambda t: t.timestamp, reverse=True)


def price_change_percent(current: Decimal, old: Decimal) -> Decimal:
    if old == 0:
        return _ZERO
    change = (current - old) / old * 100
    return change.quantize(_TWO_DP, rounding=ROUND_HALF_UP)


def current_price(trades: Iterable[Trade], now: datetime) -> PriceSnapshot | None:
    """Latest price and its change against the last trade before the 24h window.

    Returns None for an empty trade log.
    """
    ordered = newest_first(trades)
    if not ordered:
        return None
    latest = ordered[0]
    cutoff = now - DAY
    old = next((t for t in ordered if t.timestamp < cutoff), None)
    change = price_change_percent(latest.price, old.price) if old is not None else _ZERO
    return PriceSnapshot(
        current_price=latest.price,
        price_change=change,
        last_trade_time=latest.timestamp,
    )


def trades_in_window(
    trades: Iterable[Trade], now: datetime, window: timedelta = DAY
) -> list[Trade]:
    cutoff = now - window
    return [t for t in trades if t.timestamp > cutoff]


def window_activity(
    trades: Iterable[Trade], now: datetime, window: timedelta = DAY
) -> tuple[Decimal, int]:
    """(sum of totalValue, trade count) for trades inside the window."""
    recent = trades_in_window(trades, now, window)
    volume = sum((t.total_value for t in recent), _ZERO)
    return volume, len(recent)


def average_price(trades: Iterable[Trade], now: datetime, window: timedelta = DAY) -> Decimal:
    recent = trades_in_window(trades, now, window)
    if not recent:
        return _ZERO
    total = sum((t.price for t in recent), _ZERO)
    return (total / len(recent)).quantize(_TWO_DP, rounding=ROUND_HALF_UP)


def recent_trades(trades: Iterable[Trade], limit: int) -> list[Trade]:
    return newest_first(trades)[: max(limit, 0)]


# ---------------------------------------------------------------------------
# Statistics & distributions
# ---------------------------------------------------------------------------


def market_statistics(state: MarketState, trades: list[Trade], now: datetime) -> MarketStatistics:
    """Market statistics recomputed from a state snapshot and the trade log."""
    volume, count = window_activity(trades, now)
    price = current_price(trades, now)

    generation = state.total_generation
    if generation is None:
        generation = sum((p.production for p in state.producers), _ZERO)
    demand = state.total_demand
    if demand is None:
        demand = sum((c.total_demand for c in state.consumers), _ZERO)

    return MarketStatistics(
        total_generation_capacity=generation,
        total_demand=demand,
        social_welfare=state.social_welfare if state.social_welfare is not None else _ZERO,
        volume_24h=volume,
        trade_count_24h=count,
        average_price_24h=average_price(trades, now),
        current_price=price.current_price if price else None,
        price_change_24h=price.price_change if price else _ZERO,
        producer_count=len(state.producers),
        consumer_count=len(state.consumers),
    )


def producer_distribution(state: MarketState) -> list[DistributionPoint]:
    return [
        DistributionPoint(name=p.id, value=p.production, secondary=p.cost)
        for p in state.producers
    ]


def consumer_distribution(state: MarketState) -> list[DistributionPoint]:
    return [
        DistributionPoint(name=c.id, value=c.total_demand, secondary=c.balance)
        for c in state.consumers
    ]
