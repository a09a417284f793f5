from sqlalchemy import Integer, DateTime, func, String, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column
from app.db.base import Base
from app.db.types import UInt


class LedgerEvent(Base):
    __tablename__ = "ledger_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    created_at: Mapped[DateTime] = mapped_column(DateTime, server_default=func.now(), index=True)

    kind: Mapped[str] = mapped_column(String(32), index=True)

    # transfer events: holder is the source (None on issue), counterparty the
    # destination (None on burn)
    holder: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    counterparty: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    amount: Mapped[int | None] = mapped_column(UInt(), nullable=True)

    details: Mapped[dict | None] = mapped_column(JSON, nullable=True)


Index("ix_ledger_events_kind_holder", LedgerEvent.kind, LedgerEvent.holder)
