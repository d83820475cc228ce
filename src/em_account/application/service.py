"""AccountApplicationService — per-user reads (balances, trades).

All methods are read-only evaluate() calls, one ledger session each.
"""

from typing import Any

from src.em_account.application.schemas import UserBalanceResponse
from src.em_common.decimals import to_decimal
from src.em_common.enums import LedgerTx
from src.em_common.errors import LedgerResponseError
from src.em_common.json_codec import decode_ledger_json
from src.em_ledger.application.session import LedgerSessionManager, TimedContract
from src.em_market.application.schemas import TradeOut
from src.em_market.application.service import DEFAULT_TIMESTAMP_FORMAT, fetch_trades
from src.em_market.domain import read_model
from src.em_market.domain.models import Trade


class AccountApplicationService:
    def __init__(
        self,
        sessions: LedgerSessionManager,
        timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
    ) -> None:
        self._sessions = sessions
        self._timestamp_format = timestamp_format

    async def get_balance(self, user_id: str) -> Any:
        tx = LedgerTx.GET_BALANCE
        return decode_ledger_json(tx.value, await self._sessions.evaluate(tx, user_id))

    async def get_user_balance(self, user_id: str) -> UserBalanceResponse:
        """The contract returns a bare number, e.g. b"1250.5"."""
        tx = LedgerTx.GET_USER_BALANCE
        payload = await self._sessions.evaluate(tx, user_id)
        try:
            balance = to_decimal(payload.decode("utf-8", errors="replace"))
        except ValueError as exc:
            raise LedgerResponseError(tx.value, str(exc)) from None
        return UserBalanceResponse(balance=float(balance))

    async def get_user_trades(self, user_id: str) -> list[TradeOut]:
        async def _read(contract: TimedContract) -> list[Trade]:
            return await fetch_trades(contract, LedgerTx.GET_USER_TRADES, user_id)

        trades = await self._sessions.with_session(_read)
        return [
            TradeOut.from_domain(t, self._timestamp_format)
            for t in read_model.newest_first(trades)
        ]
