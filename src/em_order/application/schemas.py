# src/em_order/application/schemas.py
from decimal import Decimal

from pydantic import Field, field_validator, model_validator

from src.em_common.enums import OrderSide
from src.em_common.schemas import CamelModel, NonBlankStr


class PlaceOrderRequest(CamelModel):
    side: OrderSide
    price: Decimal = Field(gt=0, allow_inf_nan=False)
    quantity: Decimal = Field(gt=0, allow_inf_nan=False)
    user_id: NonBlankStr
    producer_id: str | None = None

    @field_validator("producer_id")
    @classmethod
    def blank_producer_is_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()

    @model_validator(mode="after")
    def producer_required_for_sell(self) -> "PlaceOrderRequest":
        """A sell order must name the producer whose energy is offered."""
        if self.side == OrderSide.SELL and self.producer_id is None:
            raise ValueError("Producer ID is required for sell orders")
        return self
