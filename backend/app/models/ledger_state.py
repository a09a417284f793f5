from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import Mapped, mapped_column
from app.db.base import Base
from app.db.types import UInt

class LedgerState(Base):
    __tablename__ = "ledger_state"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    global_rate: Mapped[int] = mapped_column(UInt())
    total_supply: Mapped[int] = mapped_column(UInt(), default=0)
    updated_at: Mapped[DateTime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())
