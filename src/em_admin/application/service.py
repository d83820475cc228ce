"""Participant and market lifecycle submits.

Each function is exactly one submit() in its own ledger session. None are
retried: a repeated submit could apply twice on the ledger.
"""

import logging

from src.em_admin.application.schemas import (
    CreateConsumerRequest,
    CreateProducerRequest,
    RunMarketRequest,
    TransferOwnershipRequest,
)
from src.em_common.decimals import to_ledger_arg
from src.em_common.enums import LedgerTx
from src.em_ledger.application.session import LedgerSessionManager

logger = logging.getLogger("em.admin")


async def create_consumer(req: CreateConsumerRequest, sessions: LedgerSessionManager) -> None:
    await sessions.submit(
        LedgerTx.CREATE_CONSUMER,
        req.id,
        to_ledger_arg(req.beta),
        to_ledger_arg(req.theta),
        to_ledger_arg(req.demand_min),
        to_ledger_arg(req.demand_max),
        to_ledger_arg(req.initial_balance),
    )
    logger.info("Consumer created: %s", req.id)


async def create_producer(req: CreateProducerRequest, sessions: LedgerSessionManager) -> None:
    await sessions.submit(
        LedgerTx.CREATE_PRODUCER,
        req.id,
        to_ledger_arg(req.a),
        to_ledger_arg(req.b),
        to_ledger_arg(req.production_min),
        to_ledger_arg(req.production_max),
        req.owner_id,
    )
    logger.info("Producer created: %s (owner %s)", req.id, req.owner_id)


async def transfer_producer_ownership(
    req: TransferOwnershipRequest, sessions: LedgerSessionManager
) -> None:
    await sessions.submit(
        LedgerTx.TRANSFER_PRODUCER_OWNERSHIP,
        req.producer_id,
        req.current_owner_id,
        req.new_owner_id,
    )
    logger.info(
        "Producer %s transferred: %s -> %s",
        req.producer_id, req.current_owner_id, req.new_owner_id,
    )


async def run_market_until_convergence(
    req: RunMarketRequest, sessions: LedgerSessionManager
) -> None:
    await sessions.submit(LedgerTx.RUN_MARKET_UNTIL_CONVERGENCE, str(req.max_iterations))


async def submit_lifecycle(tx: LedgerTx, sessions: LedgerSessionManager) -> None:
    """Argument-less lifecycle transactions (init/update market, init/clear ledger)."""
    await sessions.submit(tx)
    logger.info("Lifecycle transaction submitted: %s", tx.value)
