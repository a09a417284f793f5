from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from sqlalchemy import or_, select
from app.api.deps import db, current_user
from app.models.ledger_event import LedgerEvent
from app.schemas.event import EventOut

router = APIRouter(prefix="/events", tags=["events"])


@router.get("", response_model=list[EventOut])
def list_events(
    s: Session = Depends(db),
    u: str = Depends(current_user),
    holder: str | None = Query(default=None),
    kind: str | None = Query(default=None),
    limit: int = Query(default=200, ge=1, le=1000),
):
    q = select(LedgerEvent).order_by(LedgerEvent.id.desc())

    if holder:
        q = q.where(or_(LedgerEvent.holder == holder, LedgerEvent.counterparty == holder))
    if kind:
        q = q.where(LedgerEvent.kind == kind)

    q = q.limit(limit)
    return s.execute(q).scalars().all()
