"""Request schemas for participant and market lifecycle endpoints.

Only shape is checked here; the contract validates semantics (e.g. who owns
a producer) and rejects with its own message.
"""

from decimal import Decimal

from pydantic import Field, model_validator

from src.em_common.schemas import CamelModel, NonBlankStr


class CreateConsumerRequest(CamelModel):
    id: NonBlankStr
    beta: Decimal = Field(allow_inf_nan=False)
    theta: Decimal = Field(allow_inf_nan=False)
    demand_min: Decimal = Field(ge=0, allow_inf_nan=False)
    demand_max: Decimal = Field(gt=0, allow_inf_nan=False)
    initial_balance: Decimal = Field(ge=0, allow_inf_nan=False)

    @model_validator(mode="after")
    def demand_bounds(self) -> "CreateConsumerRequest":
        if self.demand_min > self.demand_max:
            raise ValueError("demandMin must not exceed demandMax")
        return self


class CreateProducerRequest(CamelModel):
    id: NonBlankStr
    a: Decimal = Field(allow_inf_nan=False)  # quadratic cost coefficient
    b: Decimal = Field(allow_inf_nan=False)  # linear cost coefficient
    production_min: Decimal = Field(ge=0, allow_inf_nan=False)
    production_max: Decimal = Field(gt=0, allow_inf_nan=False)
    owner_id: NonBlankStr

    @model_validator(mode="after")
    def production_bounds(self) -> "CreateProducerRequest":
        if self.production_min > self.production_max:
            raise ValueError("productionMin must not exceed productionMax")
        return self


class TransferOwnershipRequest(CamelModel):
    producer_id: NonBlankStr
    current_owner_id: NonBlankStr
    new_owner_id: NonBlankStr

    @model_validator(mode="after")
    def distinct_owners(self) -> "TransferOwnershipRequest":
        if self.current_owner_id == self.new_owner_id:
            raise ValueError("newOwnerId must differ from currentOwnerId")
        return self


class RunMarketRequest(CamelModel):
    max_iterations: int = Field(ge=1)
