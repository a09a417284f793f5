import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.db.session import atomic
from app.models.holder_account import HolderAccount  # noqa: F401
from app.models.ledger_event import LedgerEvent  # noqa: F401
from app.models.ledger_state import LedgerState  # noqa: F401
from app.models.role_grant import RoleGrant  # noqa: F401
from app.models.user import User  # noqa: F401
from app.models.vault_state import VaultState  # noqa: F401
from app.services.authz import MINT_BURN, OWNER, RoleAuthorizer
from app.services.custody import ReserveCustody
from app.services.ledger import Ledger
from app.services.ledger_state import get_ledger_state, get_vault_state
from app.services.vault import Vault

T0 = 1_700_000_000

# 5% simple annual, per second, scaled by 10**18
R0 = 1_585_489_599

OWNER_ID = "owner"
VAULT_ID = "vault"


class FixedClock:
    def __init__(self, t: int = T0):
        self.t = t

    def now(self) -> int:
        return self.t

    def advance(self, seconds: int) -> int:
        self.t += seconds
        return self.t


@pytest.fixture()
def engine():
    eng = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture()
def session(session_factory):
    s = session_factory()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture()
def clock():
    return FixedClock()


@pytest.fixture()
def ledger(session, clock):
    authz = RoleAuthorizer(session)
    with atomic(session):
        get_ledger_state(session, R0)
        get_vault_state(session)
        authz.grant(OWNER_ID, OWNER)
        authz.grant(VAULT_ID, MINT_BURN)
    return Ledger(session, authz, clock, address="test-ledger")


@pytest.fixture()
def vault(session, ledger):
    return Vault(session, ledger, ReserveCustody(session), identity=VAULT_ID)
