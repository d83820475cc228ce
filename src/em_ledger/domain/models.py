"""Ledger session domain models — pure Python, no I/O."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    """An enrolled ledger identity as stored in the wallet."""

    label: str
    msp_id: str
    certificate: str
    private_key: str
    type: str = "X.509"


@dataclass(frozen=True)
class LedgerConfig:
    """Which identity, channel and contract every session binds to."""

    channel: str
    chaincode: str
    identity_label: str
    call_timeout_seconds: float
