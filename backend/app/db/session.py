import threading
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import settings

_connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(settings.database_url, pool_pre_ping=True, connect_args=_connect_args, future=True)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

_ATOMIC_KEY = "atomic_depth"

# one writer per process; SQLite ignores SELECT ... FOR UPDATE
_writer = threading.RLock()


@contextmanager
def atomic(s: Session):
    """One all-or-nothing unit of work.

    The outermost block commits on success and rolls back on any exception.
    Inner blocks join the outer one, so a service called from another service
    never commits half of the caller's work. Outermost blocks in the same
    process never overlap: each waits for the previous one to commit or roll
    back before it starts.
    """
    depth = s.info.get(_ATOMIC_KEY, 0)
    if depth == 0:
        _writer.acquire()
    s.info[_ATOMIC_KEY] = depth + 1
    try:
        yield s
        if depth == 0:
            s.commit()
    except Exception:
        if depth == 0:
            s.rollback()
        raise
    finally:
        s.info[_ATOMIC_KEY] = depth
        if depth == 0:
            _writer.release()
