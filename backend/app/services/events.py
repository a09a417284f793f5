from sqlalchemy.orm import Session
from app.models.ledger_event import LedgerEvent


def emit(
    s: Session,
    kind: str,
    holder: str | None = None,
    counterparty: str | None = None,
    amount: int | None = None,
    details: dict | None = None,
):
    row = LedgerEvent(
        kind=kind,
        holder=holder,
        counterparty=counterparty,
        amount=amount,
        details=details,
    )
    s.add(row)
    return row
