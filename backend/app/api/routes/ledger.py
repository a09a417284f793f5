from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.deps import current_user, ledger_service
from app.schemas.ledger import AmountOut, BurnIn, HolderOut, LedgerOut, MintIn, RateUpdate, TransferIn
from app.services.fixed_point import PRECISION, annual_percent, rate_from_annual_percent
from app.services.ledger import Ledger

router = APIRouter(prefix="/ledger", tags=["ledger"])


def _ledger_out(ledger: Ledger) -> LedgerOut:
    rate = ledger.global_rate()
    return LedgerOut(
        address=ledger.address,
        global_rate=rate,
        global_annual_rate_percent=float(annual_percent(rate)),
        total_supply=ledger.total_supply(),
        precision=PRECISION,
    )


@router.get("", response_model=LedgerOut)
def ledger_info(ledger: Ledger = Depends(ledger_service), u: str = Depends(current_user)):
    return _ledger_out(ledger)


@router.post("/rate", response_model=LedgerOut)
def set_rate(body: RateUpdate, ledger: Ledger = Depends(ledger_service), u: str = Depends(current_user)):
    if body.rate is not None:
        new_rate = body.rate
    else:
        new_rate = rate_from_annual_percent(body.annual_rate_percent)
    ledger.set_global_rate(u, new_rate)
    return _ledger_out(ledger)


@router.get("/holders/{holder}", response_model=HolderOut)
def holder_info(holder: str, ledger: Ledger = Depends(ledger_service), u: str = Depends(current_user)):
    snap = ledger.snapshot(holder)
    return HolderOut(
        holder=snap.holder,
        principal=snap.principal,
        live_balance=snap.live_balance,
        accrued=snap.accrued,
        rate=snap.rate,
        annual_rate_percent=float(annual_percent(snap.rate)),
        last_settled=snap.last_settled,
        as_of=snap.as_of,
    )


@router.post("/transfers", response_model=AmountOut)
def transfer(body: TransferIn, ledger: Ledger = Depends(ledger_service), u: str = Depends(current_user)):
    now = ledger.now()
    moved = ledger.move(u, body.to, body.amount, now=now)
    return AmountOut(holder=u, amount=moved, live_balance=ledger.live_balance(u, now))


@router.post("/mint", response_model=AmountOut)
def mint(body: MintIn, ledger: Ledger = Depends(ledger_service), u: str = Depends(current_user)):
    now = ledger.now()
    ledger.credit(u, body.holder, body.amount, now=now)
    return AmountOut(holder=body.holder, amount=body.amount, live_balance=ledger.live_balance(body.holder, now))


@router.post("/burn", response_model=AmountOut)
def burn(body: BurnIn, ledger: Ledger = Depends(ledger_service), u: str = Depends(current_user)):
    now = ledger.now()
    burned = ledger.debit(u, body.holder, body.amount, now=now)
    return AmountOut(holder=body.holder, amount=burned, live_balance=ledger.live_balance(body.holder, now))
