import pytest
from sqlalchemy import select

from app.core.errors import InsufficientBalance, RateMustDecrease, Unauthorized
from app.models.ledger_event import LedgerEvent
from app.services.fixed_point import MAX_AMOUNT, SECONDS_PER_YEAR

from conftest import OWNER_ID, R0, VAULT_ID

R1 = R0 // 2
R2 = R0 // 4
DAY = 24 * 60 * 60


def test_global_rate_only_goes_down(ledger):
    with pytest.raises(RateMustDecrease):
        ledger.set_global_rate(OWNER_ID, R0)
    with pytest.raises(RateMustDecrease):
        ledger.set_global_rate(OWNER_ID, R0 + 1)
    assert ledger.global_rate() == R0

    ledger.set_global_rate(OWNER_ID, R1)
    assert ledger.global_rate() == R1

    with pytest.raises(RateMustDecrease):
        ledger.set_global_rate(OWNER_ID, R0)
    assert ledger.global_rate() == R1

    ledger.set_global_rate(OWNER_ID, 0)
    assert ledger.global_rate() == 0
    with pytest.raises(RateMustDecrease):
        ledger.set_global_rate(OWNER_ID, 0)


def test_rate_changes_are_owner_only_and_logged(ledger, session):
    with pytest.raises(Unauthorized):
        ledger.set_global_rate("alice", R1)
    with pytest.raises(Unauthorized):
        ledger.set_global_rate(VAULT_ID, R1)
    assert ledger.global_rate() == R0

    ledger.set_global_rate(OWNER_ID, R1)
    ev = session.execute(select(LedgerEvent).where(LedgerEvent.kind == "rate_changed")).scalar_one()
    assert ev.amount == R1
    assert ev.holder == OWNER_ID
    assert ev.details == {"previous_rate": str(R0)}


def test_negative_rate_is_rejected(ledger):
    with pytest.raises(ValueError):
        ledger.set_global_rate(OWNER_ID, -1)


def test_existing_holders_keep_their_locked_rate(ledger, clock):
    ledger.credit(VAULT_ID, "alice", 100_000)
    ledger.set_global_rate(OWNER_ID, R1)
    clock.advance(DAY)
    ledger.credit(VAULT_ID, "alice", 50_000)
    ledger.credit(VAULT_ID, "bob", 100_000)

    assert ledger.rate_of("alice") == R0
    assert ledger.rate_of("bob") == R1


def test_rate_resets_after_balance_returns_to_zero(ledger, clock):
    ledger.credit(VAULT_ID, "alice", 100_000)
    ledger.set_global_rate(OWNER_ID, R1)
    clock.advance(DAY)
    ledger.debit(VAULT_ID, "alice", MAX_AMOUNT)

    # an emptied holder keeps its old rate until it is credited again
    assert ledger.principal_of("alice") == 0
    assert ledger.rate_of("alice") == R0

    ledger.credit(VAULT_ID, "alice", 10)
    assert ledger.rate_of("alice") == R1


def test_zero_credit_does_not_lock_a_rate(ledger):
    ledger.credit(VAULT_ID, "alice", 0)
    assert ledger.rate_of("alice") == 0
    assert ledger.principal_of("alice") == 0


def test_fresh_recipient_inherits_the_senders_rate(ledger, clock):
    ledger.credit(VAULT_ID, "alice", 100_000)
    ledger.set_global_rate(OWNER_ID, R1)
    clock.advance(DAY)

    moved = ledger.move("alice", "carol", MAX_AMOUNT)

    assert ledger.rate_of("carol") == R0
    assert ledger.principal_of("carol") == moved
    assert ledger.principal_of("alice") == 0
    assert moved > 100_000


def test_funded_recipient_keeps_its_own_rate(ledger, clock):
    ledger.credit(VAULT_ID, "alice", 100_000)
    ledger.set_global_rate(OWNER_ID, R1)
    ledger.credit(VAULT_ID, "bob", 100_000)
    clock.advance(DAY)

    ledger.move("alice", "bob", 40_000)

    assert ledger.rate_of("bob") == R1
    assert ledger.rate_of("alice") == R0


def test_move_settles_both_endpoints(ledger, clock):
    ledger.credit(VAULT_ID, "alice", 100_000)
    ledger.credit(VAULT_ID, "bob", 100_000)
    clock.advance(SECONDS_PER_YEAR)
    alice_live = ledger.live_balance("alice")
    bob_live = ledger.live_balance("bob")

    ledger.move("alice", "bob", 1_000)

    assert ledger.live_balance("alice") == ledger.principal_of("alice") == alice_live - 1_000
    assert ledger.live_balance("bob") == ledger.principal_of("bob") == bob_live + 1_000
    assert ledger.last_settled_of("alice") == clock.now()
    assert ledger.last_settled_of("bob") == clock.now()


def test_move_overdraw_changes_nothing(ledger, clock):
    ledger.credit(VAULT_ID, "alice", 100_000)
    clock.advance(DAY)
    live = ledger.live_balance("alice")

    with pytest.raises(InsufficientBalance):
        ledger.move("alice", "dave", live + 1)

    assert ledger.principal_of("alice") == 100_000
    assert ledger.principal_of("dave") == 0
    assert ledger.rate_of("dave") == 0


def test_move_to_self_is_harmless(ledger, clock):
    ledger.credit(VAULT_ID, "alice", 100_000)
    clock.advance(DAY)
    live = ledger.live_balance("alice")

    ledger.move("alice", "alice", 5_000)

    assert ledger.principal_of("alice") == live
    assert ledger.rate_of("alice") == R0
    assert ledger.total_supply() == live


def test_early_rate_propagates_through_a_chain_of_transfers(ledger, clock):
    ledger.credit(VAULT_ID, "alice", 100_000)
    ledger.set_global_rate(OWNER_ID, R1)
    ledger.move("alice", "bob", MAX_AMOUNT)
    ledger.set_global_rate(OWNER_ID, R2)
    clock.advance(DAY)
    ledger.move("bob", "carol", 60_000)

    assert ledger.rate_of("bob") == R0
    assert ledger.rate_of("carol") == R0


def test_zero_moves_do_not_create_holders(ledger):
    ledger.credit(VAULT_ID, "alice", 100_000)

    assert ledger.move("ghost", "alice", 0) == 0
    assert ledger.move("alice", "nobody", 0) == 0
    assert ledger.move("ghost", "nobody", MAX_AMOUNT) == 0
    with pytest.raises(InsufficientBalance):
        ledger.move("ghost", "alice", 1)

    holders = [a.holder for a in ledger.holders()]
    assert holders == ["alice"]
    assert ledger.principal_of("alice") == 100_000


def test_first_non_zero_move_creates_the_recipient_settled_now(ledger, clock):
    ledger.credit(VAULT_ID, "alice", 100_000)
    clock.advance(DAY)

    ledger.move("alice", "erin", 1_000)

    assert ledger.principal_of("erin") == 1_000
    assert ledger.rate_of("erin") == R0
    assert ledger.last_settled_of("erin") == clock.now()
