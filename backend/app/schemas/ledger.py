from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from app.schemas.amounts import Units, UnitsOrMax


class LedgerOut(BaseModel):
    address: str
    global_rate: int
    global_annual_rate_percent: float
    total_supply: int
    precision: int


class RateUpdate(BaseModel):
    rate: Units | None = None
    annual_rate_percent: Decimal | None = None

    @model_validator(mode="after")
    def exactly_one(self):
        if (self.rate is None) == (self.annual_rate_percent is None):
            raise ValueError("give exactly one of rate or annual_rate_percent")
        if self.annual_rate_percent is not None and self.annual_rate_percent < 0:
            raise ValueError("annual_rate_percent must be non-negative")
        return self


class HolderOut(BaseModel):
    holder: str
    principal: int
    live_balance: int
    accrued: int
    rate: int
    annual_rate_percent: float
    last_settled: int
    as_of: int


class TransferIn(BaseModel):
    to: str = Field(min_length=1, max_length=64)
    amount: UnitsOrMax


class MintIn(BaseModel):
    holder: str = Field(min_length=1, max_length=64)
    amount: Units


class BurnIn(BaseModel):
    holder: str = Field(min_length=1, max_length=64)
    amount: UnitsOrMax


class AmountOut(BaseModel):
    holder: str
    amount: int
    live_balance: int
