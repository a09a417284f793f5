import pytest
from sqlalchemy import select

from app.core.errors import InsufficientBalance
from app.db.session import atomic
from app.models.holder_account import HolderAccount
from app.models.ledger_event import LedgerEvent
from app.services.ledger_state import get_ledger_state
from app.services.principal import PrincipalLedger


def _sum_balances(session) -> int:
    return sum(int(a.principal) for a in session.execute(select(HolderAccount)).scalars().all())


def _transfers(session):
    return (
        session.execute(select(LedgerEvent).where(LedgerEvent.kind == "transfer").order_by(LedgerEvent.id.asc()))
        .scalars()
        .all()
    )


def test_supply_is_conserved_across_issue_burn_transfer(session):
    units = PrincipalLedger(session)
    with atomic(session):
        get_ledger_state(session, 0)
        units.issue("alice", 1_000)
        units.issue("bob", 250)
        units.transfer("alice", "carol", 400)
        units.burn("bob", 50)

    assert units.balance_of("alice") == 600
    assert units.balance_of("bob") == 200
    assert units.balance_of("carol") == 400
    assert units.total_supply() == 1_200
    assert _sum_balances(session) == units.total_supply()


def test_every_movement_is_logged(session):
    units = PrincipalLedger(session)
    with atomic(session):
        get_ledger_state(session, 0)
        units.issue("alice", 10)
        units.transfer("alice", "bob", 4)
        units.burn("bob", 1)

    rows = [(e.holder, e.counterparty, e.amount) for e in _transfers(session)]
    assert rows == [(None, "alice", 10), ("alice", "bob", 4), ("bob", None, 1)]


def test_overdrawn_burn_and_transfer_are_rejected(session):
    units = PrincipalLedger(session)
    with atomic(session):
        get_ledger_state(session, 0)
        units.issue("alice", 10)

    with pytest.raises(InsufficientBalance):
        units.burn("alice", 11)
    with pytest.raises(InsufficientBalance):
        units.transfer("alice", "bob", 11)
    with pytest.raises(InsufficientBalance):
        units.burn("nobody", 1)

    assert units.balance_of("alice") == 10
    assert units.total_supply() == 10


def test_negative_amounts_are_rejected(session):
    units = PrincipalLedger(session)
    with pytest.raises(ValueError):
        units.issue("alice", -1)


def test_balances_beyond_64_bits_are_exact(session):
    units = PrincipalLedger(session)
    big = 10**30 + 7
    with atomic(session):
        get_ledger_state(session, 0)
        units.issue("whale", big)

    session.expire_all()
    assert units.balance_of("whale") == big
    assert units.total_supply() == big
