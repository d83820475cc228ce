# src/em_order/application/service.py
import logging

from src.em_common.decimals import to_ledger_arg
from src.em_common.enums import LedgerTx
from src.em_ledger.application.session import LedgerSessionManager
from src.em_order.application.schemas import PlaceOrderRequest

logger = logging.getLogger("em.order")


async def place_order(req: PlaceOrderRequest, sessions: LedgerSessionManager) -> None:
    """Submit one order; the contract owns it from here on. Never retried."""
    await sessions.submit(
        LedgerTx.PLACE_ORDER,
        req.side.value,
        to_ledger_arg(req.price),
        to_ledger_arg(req.quantity),
        req.user_id,
        req.producer_id or "",
    )
    logger.info(
        "Order placed: %s %s @ %s by %s",
        req.side.value, req.quantity, req.price, req.user_id,
    )


async def match_orders(sessions: LedgerSessionManager) -> None:
    await sessions.submit(LedgerTx.MATCH_ORDERS)
