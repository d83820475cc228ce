"""Global enums — transaction names must match the contract exactly."""

from enum import Enum


class OrderSide(str, Enum):
    BUY = "buy"
    SELL = "sell"


class LedgerTx(str, Enum):
    """Contract transaction names invoked by the gateway."""

    # Mutating (submit)
    INIT_LEDGER = "InitLedger"
    CLEAR_LEDGER = "ClearLedger"
    PLACE_ORDER = "PlaceOrder"
    MATCH_ORDERS = "MatchOrders"
    CREATE_CONSUMER = "CreateConsumer"
    CREATE_PRODUCER = "CreateProducer"
    TRANSFER_PRODUCER_OWNERSHIP = "TransferProducerOwnership"
    INIT_MARKET = "InitMarket"
    UPDATE_MARKET = "UpdateMarket"
    RUN_MARKET_UNTIL_CONVERGENCE = "RunMarketUntilConvergence"
    # Read-only (evaluate)
    GET_BALANCE = "GetBalance"
    GET_USER_BALANCE = "GetUserBalance"
    GET_USER_TRADES = "GetUserTrades"
    GET_ORDER_BOOK = "GetOrderBook"
    GET_TRADE_HISTORY = "GetTradeHistory"
    GET_MARKET_STATE = "GetMarketState"
    GET_MARKET_STATISTICS = "GetMarketStatistics"
    GET_PRODUCER_DETAILS = "GetProducerDetails"


class StreamEvent(str, Enum):
    ORDER_BOOK_UPDATE = "orderBookUpdate"
    ERROR = "error"
