from sqlalchemy import String
from sqlalchemy.types import TypeDecorator


class UInt(TypeDecorator):
    """Unbounded non-negative integer stored as a decimal string.

    Ledger amounts are scaled by 10**18 and overflow 64-bit columns, and SQLite
    coerces large NUMERIC values to REAL. A string column keeps them exact on
    every backend.
    """

    impl = String
    cache_ok = True

    def __init__(self, length: int = 80):
        super().__init__(length)

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        v = int(value)
        if v < 0:
            raise ValueError("UInt column cannot store a negative value")
        return str(v)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return int(value)
