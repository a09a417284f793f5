from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.errors import InsufficientBalance
from app.models.holder_account import HolderAccount
from app.services.events import emit
from app.services.ledger_state import get_ledger_state

TRANSFER = "transfer"


def check_amount(amount: int) -> int:
    amount = int(amount)
    if amount < 0:
        raise ValueError("amount must be non-negative")
    return amount


class PrincipalLedger:
    """Plain fungible-unit bookkeeping: balances, total supply, transfer log.

    Knows nothing about interest. Every issue, burn and transfer appends one
    `transfer` event; issue has no source holder and burn no destination.
    """

    def __init__(self, s: Session):
        self.s = s

    def account(self, holder: str, create: bool = False) -> HolderAccount | None:
        acct = self.s.execute(select(HolderAccount).where(HolderAccount.holder == holder)).scalar_one_or_none()
        if acct is None and create:
            acct = HolderAccount(holder=holder, principal=0, rate=0, last_settled=0)
            self.s.add(acct)
            self.s.flush()
        return acct

    def balance_of(self, holder: str) -> int:
        acct = self.account(holder)
        return int(acct.principal) if acct is not None else 0

    def total_supply(self) -> int:
        return int(get_ledger_state(self.s).total_supply)

    def issue(self, holder: str, amount: int) -> None:
        amount = check_amount(amount)
        acct = self.account(holder, create=True)
        state = get_ledger_state(self.s)
        acct.principal = int(acct.principal) + amount
        state.total_supply = int(state.total_supply) + amount
        emit(self.s, TRANSFER, holder=None, counterparty=holder, amount=amount)

    def burn(self, holder: str, amount: int) -> None:
        amount = check_amount(amount)
        acct = self.account(holder)
        have = int(acct.principal) if acct is not None else 0
        if amount > have:
            raise InsufficientBalance(f"{holder} holds {have}, cannot burn {amount}")
        if acct is not None:
            acct.principal = have - amount
        state = get_ledger_state(self.s)
        state.total_supply = int(state.total_supply) - amount
        emit(self.s, TRANSFER, holder=holder, counterparty=None, amount=amount)

    def transfer(self, sender: str, to: str, amount: int) -> None:
        amount = check_amount(amount)
        src = self.account(sender)
        have = int(src.principal) if src is not None else 0
        if amount > have:
            raise InsufficientBalance(f"{sender} holds {have}, cannot transfer {amount}")
        dst = self.account(to, create=True)
        if src is not None and src is not dst:
            src.principal = have - amount
            dst.principal = int(dst.principal) + amount
        emit(self.s, TRANSFER, holder=sender, counterparty=to, amount=amount)
