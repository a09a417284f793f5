from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import InsufficientBalance, RateMustDecrease
from app.db.session import atomic
from app.models.holder_account import HolderAccount
from app.services.authz import MINT_BURN, OWNER, Authorizer
from app.services.events import emit
from app.services.fixed_point import accrue, resolve_amount
from app.services.ledger_state import get_ledger_state, lock_ledger
from app.services.principal import PrincipalLedger, check_amount
from app.utils.clock import Clock, default_clock

logger = logging.getLogger(__name__)

RATE_CHANGED = "rate_changed"


@dataclass(frozen=True)
class HolderSnapshot:
    holder: str
    principal: int
    live_balance: int
    accrued: int
    rate: int
    last_settled: int
    as_of: int


def _live(acct: HolderAccount | None, now: int) -> int:
    if acct is None:
        return 0
    principal = int(acct.principal)
    if principal == 0:
        return 0
    return accrue(principal, int(acct.rate), now - int(acct.last_settled))


class Ledger:
    """Interest-bearing credit ledger.

    Balances grow linearly at the rate each holder locked in when their balance
    last went from zero to non-zero. Nothing runs in the background: reads
    compute the accrued amount from stored state and "now", and every mutation
    first settles the holders it touches, folding accrued interest into
    principal and restarting their accrual clock.

    Mutations run inside `atomic`, so a failure anywhere undoes the
    settlements performed earlier in the same call.
    """

    def __init__(
        self,
        s: Session,
        authz: Authorizer,
        clock: Clock | None = None,
        address: str | None = None,
    ):
        self.s = s
        self.authz = authz
        self.clock = clock or default_clock
        self.address = address or settings.ledger_address
        self.units = PrincipalLedger(s)

    def now(self, now: int | None = None) -> int:
        return self.clock.now() if now is None else int(now)

    # views

    def global_rate(self) -> int:
        return int(get_ledger_state(self.s).global_rate)

    def total_supply(self) -> int:
        return self.units.total_supply()

    def principal_of(self, holder: str) -> int:
        return self.units.balance_of(holder)

    def rate_of(self, holder: str) -> int:
        acct = self.units.account(holder)
        return int(acct.rate) if acct is not None else 0

    def last_settled_of(self, holder: str) -> int:
        acct = self.units.account(holder)
        return int(acct.last_settled) if acct is not None else 0

    def live_balance(self, holder: str, now: int | None = None) -> int:
        return _live(self.units.account(holder), self.now(now))

    def accrued_of(self, holder: str, now: int | None = None) -> int:
        acct = self.units.account(holder)
        if acct is None:
            return 0
        return _live(acct, self.now(now)) - int(acct.principal)

    def snapshot(self, holder: str, now: int | None = None) -> HolderSnapshot:
        now = self.now(now)
        acct = self.units.account(holder)
        if acct is None:
            return HolderSnapshot(holder, 0, 0, 0, 0, 0, now)
        live = _live(acct, now)
        return HolderSnapshot(
            holder=holder,
            principal=int(acct.principal),
            live_balance=live,
            accrued=live - int(acct.principal),
            rate=int(acct.rate),
            last_settled=int(acct.last_settled),
            as_of=now,
        )

    def holders(self) -> list[HolderAccount]:
        return list(self.s.execute(select(HolderAccount).order_by(HolderAccount.holder.asc())).scalars().all())

    def total_liabilities(self, now: int | None = None) -> int:
        now = self.now(now)
        return sum((_live(a, now) for a in self.holders()), 0)

    # settlement

    def _settle(self, holder: str, now: int, create: bool = True) -> HolderAccount | None:
        acct = self.units.account(holder, create=create)
        if acct is None:
            return None
        # a holder's accrual clock never runs backwards
        now = max(now, int(acct.last_settled))
        owed = _live(acct, now) - int(acct.principal)
        if owed > 0:
            self.units.issue(holder, owed)
        acct.last_settled = now
        return acct

    def settle(self, holder: str, now: int | None = None) -> int:
        """Materialize interest owed to `holder`; returns the amount minted."""
        with atomic(self.s):
            lock_ledger(self.s)
            now = self.now(now)
            before = self.principal_of(holder)
            acct = self._settle(holder, now, create=False)
            return int(acct.principal) - before if acct is not None else 0

    def credit(self, caller: str, holder: str, amount: int, now: int | None = None) -> None:
        amount = check_amount(amount)
        with atomic(self.s):
            self.authz.require(caller, MINT_BURN)
            lock_ledger(self.s)
            acct = self._settle(holder, self.now(now))
            if int(acct.principal) == 0 and amount > 0:
                acct.rate = self.global_rate()
            self.units.issue(holder, amount)

    def debit(self, caller: str, holder: str, amount: int, now: int | None = None) -> int:
        amount = check_amount(amount)
        with atomic(self.s):
            self.authz.require(caller, MINT_BURN)
            lock_ledger(self.s)
            now = self.now(now)
            # debits never create a record for a holder that was never credited
            acct = self._settle(holder, now, create=False)
            have = int(acct.principal) if acct is not None else 0
            amount = resolve_amount(amount, have)
            if amount > have:
                raise InsufficientBalance(f"{holder} holds {have}, cannot debit {amount}")
            if acct is None:
                return 0
            self.units.burn(holder, amount)
            return amount

    def move(self, sender: str, to: str, amount: int, now: int | None = None) -> int:
        amount = check_amount(amount)
        with atomic(self.s):
            lock_ledger(self.s)
            now = self.now(now)
            src = self._settle(sender, now, create=False)
            dst = self._settle(to, now, create=False)
            have = int(src.principal) if src is not None else 0
            amount = resolve_amount(amount, have)
            if amount > have:
                raise InsufficientBalance(f"{sender} holds {have}, cannot move {amount}")
            if dst is None:
                # only a non-zero move makes the recipient a holder
                if amount == 0:
                    return 0
                dst = self.units.account(to, create=True)
                dst.last_settled = now
            if src is None:
                return 0
            # a fresh recipient accrues at the sender's rate, not the current one
            if dst is not src and int(dst.principal) == 0 and amount > 0:
                dst.rate = int(src.rate)
            self.units.transfer(sender, to, amount)
            return amount

    def set_global_rate(self, caller: str, new_rate: int) -> None:
        new_rate = int(new_rate)
        if new_rate < 0:
            raise ValueError("rate must be non-negative")
        with atomic(self.s):
            self.authz.require(caller, OWNER)
            state = lock_ledger(self.s)
            current = int(state.global_rate)
            if new_rate >= current:
                raise RateMustDecrease(f"new rate {new_rate} is not below current rate {current}")
            state.global_rate = new_rate
            emit(self.s, RATE_CHANGED, holder=caller, amount=new_rate, details={"previous_rate": str(current)})
        logger.info("global rate lowered from %s to %s by %s", current, new_rate, caller)
