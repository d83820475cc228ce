"""Session manager construction and the FastAPI dependency that hands it out.

Usage in any router:
    from src.em_ledger.application.dependencies import get_session_manager

    @router.get("/thing")
    async def thing(sessions: LedgerSessionManager = Depends(get_session_manager)):
        ...
"""

from starlette.requests import HTTPConnection

from config.settings import Settings
from src.em_ledger.application.session import LedgerSessionManager
from src.em_ledger.domain.models import LedgerConfig
from src.em_ledger.infrastructure.gateway_client import HttpLedgerConnector
from src.em_ledger.infrastructure.wallet import FileSystemWallet


def build_session_manager(settings: Settings) -> LedgerSessionManager:
    config = LedgerConfig(
        channel=settings.LEDGER_CHANNEL,
        chaincode=settings.LEDGER_CHAINCODE,
        identity_label=settings.LEDGER_IDENTITY,
        call_timeout_seconds=settings.LEDGER_CALL_TIMEOUT_SECONDS,
    )
    connector = HttpLedgerConnector(
        settings.LEDGER_GATEWAY_URL,
        connect_timeout=settings.LEDGER_CONNECT_TIMEOUT_SECONDS,
        call_timeout=settings.LEDGER_CALL_TIMEOUT_SECONDS,
    )
    return LedgerSessionManager(config, FileSystemWallet(settings.WALLET_PATH), connector)


def get_session_manager(conn: HTTPConnection) -> LedgerSessionManager:
    """FastAPI dependency: the app-wide session manager (stateless, handles are per call)."""
    return conn.app.state.ledger_sessions
