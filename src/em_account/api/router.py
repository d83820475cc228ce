"""em_account REST API — per-user reads, no authentication at this layer."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request

from src.em_account.application.schemas import UserBalanceResponse
from src.em_account.application.service import AccountApplicationService
from src.em_common.validation import require_id
from src.em_ledger.application.dependencies import get_session_manager
from src.em_ledger.application.session import LedgerSessionManager
from src.em_market.application.schemas import TradeOut

router = APIRouter(tags=["account"])


def get_account_service(
    request: Request,
    sessions: Annotated[LedgerSessionManager, Depends(get_session_manager)],
) -> AccountApplicationService:
    return AccountApplicationService(
        sessions, timestamp_format=request.app.state.settings.TRADE_TIMESTAMP_FORMAT
    )


AccountService = Annotated[AccountApplicationService, Depends(get_account_service)]


@router.get("/getBalance/{userId}")
async def get_balance(userId: str, svc: AccountService) -> Any:  # noqa: N803
    return await svc.get_balance(require_id(userId, "userId"))


@router.get("/getUserBalance/{userId}", response_model=UserBalanceResponse)
async def get_user_balance(userId: str, svc: AccountService) -> UserBalanceResponse:  # noqa: N803
    return await svc.get_user_balance(require_id(userId, "userId"))


@router.get("/getUserTrades/{userId}", response_model=list[TradeOut])
async def get_user_trades(userId: str, svc: AccountService) -> list[TradeOut]:  # noqa: N803
    return await svc.get_user_trades(require_id(userId, "userId"))
