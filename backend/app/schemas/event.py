from pydantic import BaseModel
from datetime import datetime


class EventOut(BaseModel):
    id: int
    created_at: datetime
    kind: str
    holder: str | None
    counterparty: str | None
    amount: int | None
    details: dict | None

    class Config:
        from_attributes = True
