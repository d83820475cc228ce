"""LedgerSessionManager — per-call ledger handle lifecycle.

Every logical operation gets its own handle:

    identity lookup -> connect -> bind contract -> fn(contract) -> close

The handle is released on every exit path (return, exception, timeout,
cancellation). Handles are never pooled or shared between concurrent calls.
Errors propagate unchanged; nothing is retried here.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TypeVar

from src.em_common.enums import LedgerTx
from src.em_common.errors import IdentityNotFoundError, LedgerTimeoutError
from src.em_ledger.domain.models import LedgerConfig
from src.em_ledger.domain.protocols import IdentityStore, LedgerConnector, LedgerContract

logger = logging.getLogger("em.ledger")

T = TypeVar("T")


def _tx_name(tx: LedgerTx | str) -> str:
    return tx.value if isinstance(tx, LedgerTx) else tx


class TimedContract:
    """Wraps a contract so every call is bounded by a timeout."""

    def __init__(self, contract: LedgerContract, timeout: float) -> None:
        self._contract = contract
        self._timeout = timeout

    async def submit(self, tx: LedgerTx | str, *args: str) -> bytes:
        name = _tx_name(tx)
        try:
            return await asyncio.wait_for(self._contract.submit(name, *args), self._timeout)
        except asyncio.TimeoutError:
            raise LedgerTimeoutError(name, mutating=True) from None

    async def evaluate(self, tx: LedgerTx | str, *args: str) -> bytes:
        name = _tx_name(tx)
        try:
            return await asyncio.wait_for(self._contract.evaluate(name, *args), self._timeout)
        except asyncio.TimeoutError:
            raise LedgerTimeoutError(name, mutating=False) from None


class LedgerSessionManager:
    def __init__(
        self,
        config: LedgerConfig,
        wallet: IdentityStore,
        connector: LedgerConnector,
    ) -> None:
        self._config = config
        self._wallet = wallet
        self._connector = connector

    @asynccontextmanager
    async def session(self) -> AsyncIterator[TimedContract]:
        """Acquire a handle for exactly one logical operation.

        Raises IdentityNotFoundError / LedgerConnectionError before any handle
        exists; once connected, the handle is closed exactly once.
        """
        label = self._config.identity_label
        identity = await self._wallet.get(label)
        if identity is None:
            logger.warning("Ledger identity %r not found in wallet", label)
            raise IdentityNotFoundError(label)

        connection = await self._connector.connect(identity)
        logger.debug("Ledger handle acquired (%s)", label)
        try:
            contract = connection.get_contract(self._config.channel, self._config.chaincode)
            yield TimedContract(contract, self._config.call_timeout_seconds)
        finally:
            await connection.close()
            logger.debug("Ledger handle released (%s)", label)

    async def with_session(self, fn: Callable[[TimedContract], Awaitable[T]]) -> T:
        async with self.session() as contract:
            return await fn(contract)

    async def submit(self, tx: LedgerTx | str, *args: str) -> bytes:
        async with self.session() as contract:
            return await contract.submit(tx, *args)

    async def evaluate(self, tx: LedgerTx | str, *args: str) -> bytes:
        async with self.session() as contract:
            return await contract.evaluate(tx, *args)
