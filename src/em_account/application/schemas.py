from src.em_common.schemas import CamelModel


class UserBalanceResponse(CamelModel):
    balance: float
