from pydantic import BaseModel

from app.schemas.amounts import Units, UnitsOrMax


class VaultOut(BaseModel):
    ledger_address: str
    held_assets: int
    liabilities: int
    shortfall: int
    as_of: int


class DepositIn(BaseModel):
    amount: Units


class RedeemIn(BaseModel):
    amount: UnitsOrMax


class RewardIn(BaseModel):
    amount: Units
