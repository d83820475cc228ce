"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8080
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import Settings
from config.settings import settings as default_settings
from src.em_account.api.router import router as account_router
from src.em_admin.api.router import router as admin_router
from src.em_broadcast.api.router import router as stream_router
from src.em_broadcast.application.service import OrderBookBroadcaster
from src.em_gateway.errors import register_exception_handlers
from src.em_gateway.logging_config import configure_logging
from src.em_gateway.middleware.request_log import RequestLogMiddleware
from src.em_ledger.application.dependencies import build_session_manager
from src.em_ledger.application.session import LedgerSessionManager
from src.em_market.api.router import router as market_router
from src.em_order.api.router import router as order_router

VERSION = "0.1.0"


def create_app(
    settings: Settings | None = None,
    session_manager: LedgerSessionManager | None = None,
) -> FastAPI:
    """Build the app. Tests pass their own settings and a fake-backed session manager."""
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    sessions = session_manager or build_session_manager(settings)
    broadcaster = OrderBookBroadcaster(
        sessions,
        interval_seconds=settings.ORDER_BOOK_PUSH_INTERVAL_SECONDS,
        queue_size=settings.ORDER_BOOK_QUEUE_SIZE,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        # No startup connection: ledger handles are opened per call.
        yield
        await broadcaster.close()

    app = FastAPI(
        title=settings.APP_NAME,
        version=VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.ledger_sessions = sessions
    app.state.broadcaster = broadcaster

    app.add_middleware(RequestLogMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "Accept", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
    )
    register_exception_handlers(app)

    app.include_router(order_router, prefix="/api")
    app.include_router(market_router, prefix="/api")
    app.include_router(account_router, prefix="/api")
    app.include_router(admin_router, prefix="/api")
    app.include_router(stream_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "version": VERSION}

    return app


app = create_app()
