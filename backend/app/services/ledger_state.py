from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.ledger_state import LedgerState
from app.models.vault_state import VaultState

STATE_ID = 1


def get_ledger_state(s: Session, initial_rate: int | None = None, lock: bool = False) -> LedgerState:
    if lock:
        row = s.get(LedgerState, STATE_ID, with_for_update=True, populate_existing=True)
    else:
        row = s.get(LedgerState, STATE_ID)
    if row is not None:
        return row

    rate = initial_rate if initial_rate is not None else settings.initial_global_rate
    if rate < 0:
        raise ValueError("initial global rate must be non-negative")
    row = LedgerState(id=STATE_ID, global_rate=int(rate), total_supply=0)
    s.add(row)
    s.flush()
    return row


def lock_ledger(s: Session) -> LedgerState:
    """Take the ledger-wide write lock for the current transaction.

    Every ledger and vault mutation calls this before reading balances. The
    single state row acts as the mutex across worker processes; pending
    changes are flushed first and everything loaded earlier is reloaded, so
    nothing read before the lock was granted is trusted after it.
    """
    s.flush()
    s.expire_all()
    return get_ledger_state(s, lock=True)


def get_vault_state(s: Session) -> VaultState:
    row = s.get(VaultState, STATE_ID)
    if row is not None:
        return row

    row = VaultState(id=STATE_ID, held_assets=0)
    s.add(row)
    s.flush()
    return row
