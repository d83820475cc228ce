"""Market domain models — mirrors of ledger-owned state, pure Python, no I/O.

None of these are cached between requests; each read is rebuilt from a
fresh ledger query.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class Trade:
    buyer_id: str
    seller_id: str
    price: Decimal
    quantity: Decimal
    timestamp: datetime
    producer_id: str = ""
    transaction_id: str = ""
    block_height: int = 0

    @property
    def total_value(self) -> Decimal:
        return self.price * self.quantity


@dataclass(frozen=True)
class Producer:
    id: str
    owner_id: str
    production: Decimal
    cost: Decimal


@dataclass(frozen=True)
class Consumer:
    id: str
    total_demand: Decimal
    balance: Decimal


@dataclass(frozen=True)
class MarketState:
    producers: list[Producer] = field(default_factory=list)
    consumers: list[Consumer] = field(default_factory=list)
    # Ledger-native aggregates; None when the snapshot omits them
    total_generation: Decimal | None = None
    total_demand: Decimal | None = None
    social_welfare: Decimal | None = None


@dataclass(frozen=True)
class PriceSnapshot:
    current_price: Decimal
    price_change: Decimal  # percent, 2 dp
    last_trade_time: datetime


@dataclass(frozen=True)
class MarketStatistics:
    total_generation_capacity: Decimal
    total_demand: Decimal
    social_welfare: Decimal
    volume_24h: Decimal
    trade_count_24h: int
    average_price_24h: Decimal
    current_price: Decimal | None
    price_change_24h: Decimal
    producer_count: int
    consumer_count: int


@dataclass(frozen=True)
class DistributionPoint:
    """One bar/slice of a producer or consumer chart."""

    name: str
    value: Decimal
    secondary: Decimal
