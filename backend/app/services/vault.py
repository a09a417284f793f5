from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import InsufficientBalance, RedeemTransferFailed, ZeroDeposit
from app.db.session import atomic
from app.models.ledger_event import LedgerEvent
from app.services.custody import Custody
from app.services.events import emit
from app.services.fixed_point import resolve_amount
from app.services.ledger import Ledger
from app.services.ledger_state import lock_ledger
from app.services.principal import check_amount

logger = logging.getLogger(__name__)

DEPOSIT = "deposit"
REDEEM = "redeem"
REWARD_FUNDED = "reward_funded"


@dataclass(frozen=True)
class Solvency:
    held_assets: int
    liabilities: int
    shortfall: int
    as_of: int


class Vault:
    """Custodial front of the ledger.

    Deposits credit the ledger one-for-one with the base asset received;
    redemptions debit the ledger first and only then release funds, so a failed
    release aborts the whole call with the debit undone. The release is the
    last step before commit and carries a reference that stays the same until
    the redemption commits, so a payee deduping on it pays a retry once.
    """

    def __init__(self, s: Session, ledger: Ledger, custody: Custody, identity: str | None = None):
        self.s = s
        self.ledger = ledger
        self.custody = custody
        # the identity holding the mint_burn role on the ledger
        self.identity = identity or settings.vault_identity

    def vault_ledger_address(self) -> str:
        return self.ledger.address

    def held_assets(self) -> int:
        return self.custody.held()

    def solvency(self, now: int | None = None) -> Solvency:
        now = self.ledger.now(now)
        held = self.custody.held()
        owed = self.ledger.total_liabilities(now)
        return Solvency(held_assets=held, liabilities=owed, shortfall=max(0, owed - held), as_of=now)

    def deposit(self, caller: str, amount: int, now: int | None = None) -> int:
        amount = check_amount(amount)
        if amount == 0:
            raise ZeroDeposit("deposit amount must be positive")
        with atomic(self.s):
            lock_ledger(self.s)
            now = self.ledger.now(now)
            self.custody.receive_funds(caller, amount)
            self.ledger.credit(self.identity, caller, amount, now=now)
            emit(self.s, DEPOSIT, holder=caller, amount=amount)
        return amount

    def redeem(self, caller: str, amount: int, now: int | None = None) -> int:
        amount = check_amount(amount)
        released = None
        try:
            with atomic(self.s):
                lock_ledger(self.s)
                now = self.ledger.now(now)
                amount = resolve_amount(amount, self.ledger.live_balance(caller, now))
                if amount == 0:
                    raise InsufficientBalance(f"{caller} has nothing to redeem")
                reference = self.redeem_reference(caller)
                self.ledger.debit(self.identity, caller, amount, now=now)
                emit(self.s, REDEEM, holder=caller, amount=amount, details={"reference": reference})
                if not self.custody.release_funds(caller, amount, reference=reference):
                    raise RedeemTransferFailed(f"could not release {amount} to {caller}")
                released = reference
        except Exception:
            if released is not None:
                # funds left the vault but the debit did not commit
                logger.exception("redeem %s paid %s to %s but was rolled back", released, amount, caller)
            raise
        return amount

    def redeem_reference(self, caller: str) -> str:
        """Reference of the caller's next redemption: address, holder and sequence number."""
        done = self.s.execute(
            select(func.count()).select_from(LedgerEvent).where(LedgerEvent.kind == REDEEM, LedgerEvent.holder == caller)
        ).scalar_one()
        return f"{self.ledger.address}:{caller}:redeem:{done + 1}"

    def reward_fund(self, caller: str, amount: int) -> int:
        amount = check_amount(amount)
        if amount == 0:
            raise ZeroDeposit("reward amount must be positive")
        with atomic(self.s):
            lock_ledger(self.s)
            self.custody.receive_funds(caller, amount)
            emit(self.s, REWARD_FUNDED, holder=caller, amount=amount)
        return amount
