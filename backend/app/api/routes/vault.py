from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.deps import current_user, vault_service
from app.schemas.ledger import AmountOut
from app.schemas.vault import DepositIn, RedeemIn, RewardIn, VaultOut
from app.services.vault import Vault

router = APIRouter(prefix="/vault", tags=["vault"])


@router.get("", response_model=VaultOut)
def vault_info(vault: Vault = Depends(vault_service), u: str = Depends(current_user)):
    sol = vault.solvency()
    return VaultOut(
        ledger_address=vault.vault_ledger_address(),
        held_assets=sol.held_assets,
        liabilities=sol.liabilities,
        shortfall=sol.shortfall,
        as_of=sol.as_of,
    )


@router.post("/deposit", response_model=AmountOut)
def deposit(body: DepositIn, vault: Vault = Depends(vault_service), u: str = Depends(current_user)):
    now = vault.ledger.now()
    amount = vault.deposit(u, body.amount, now=now)
    return AmountOut(holder=u, amount=amount, live_balance=vault.ledger.live_balance(u, now))


@router.post("/redeem", response_model=AmountOut)
def redeem(body: RedeemIn, vault: Vault = Depends(vault_service), u: str = Depends(current_user)):
    now = vault.ledger.now()
    amount = vault.redeem(u, body.amount, now=now)
    return AmountOut(holder=u, amount=amount, live_balance=vault.ledger.live_balance(u, now))


@router.post("/rewards", response_model=AmountOut)
def fund_rewards(body: RewardIn, vault: Vault = Depends(vault_service), u: str = Depends(current_user)):
    amount = vault.reward_fund(u, body.amount)
    return AmountOut(holder=u, amount=amount, live_balance=vault.ledger.live_balance(u))
