"""Ledger collaborator protocols.

The session manager only depends on these; the HTTP gateway client in
infrastructure/ is one implementation, tests supply in-memory fakes.
"""

from typing import Protocol

from src.em_ledger.domain.models import Identity


class LedgerContract(Protocol):
    async def submit(self, tx_name: str, *args: str) -> bytes:
        """Ordered, durable, mutating transaction."""
        ...

    async def evaluate(self, tx_name: str, *args: str) -> bytes:
        """Read-only query; result may lag recent submits."""
        ...


class LedgerConnection(Protocol):
    def get_contract(self, channel: str, chaincode: str) -> LedgerContract: ...

    async def close(self) -> None: ...


class LedgerConnector(Protocol):
    async def connect(self, identity: Identity) -> LedgerConnection:
        """Handshake with the network. Raises LedgerConnectionError on failure."""
        ...


class IdentityStore(Protocol):
    async def get(self, label: str) -> Identity | None: ...
