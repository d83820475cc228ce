"""Shared test fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient

from config.settings import Settings
from src.main import create_app
from fakes import FakeLedger, make_sessions


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
def sessions(ledger: FakeLedger):
    return make_sessions(ledger)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        ORDER_BOOK_PUSH_INTERVAL_SECONDS=0.05,
        LEDGER_CALL_TIMEOUT_SECONDS=1.0,
        TRADE_TIMESTAMP_FORMAT="%Y-%m-%d %H:%M:%S",
    )


@pytest.fixture
def app(test_settings: Settings, sessions):
    return create_app(test_settings, session_manager=sessions)


@pytest.fixture
async def client(app) -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints against the fake ledger."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
