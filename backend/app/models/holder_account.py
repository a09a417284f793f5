from sqlalchemy import BigInteger, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column
from app.db.base import Base
from app.db.types import UInt

class HolderAccount(Base):
    __tablename__ = "holder_accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    holder: Mapped[str] = mapped_column(String(64), unique=True, index=True)

    principal: Mapped[int] = mapped_column(UInt(), default=0)
    rate: Mapped[int] = mapped_column(UInt(), default=0)
    last_settled: Mapped[int] = mapped_column(BigInteger, default=0)

    created_at: Mapped[DateTime] = mapped_column(DateTime, server_default=func.now())
