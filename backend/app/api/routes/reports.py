from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from io import BytesIO

from app.api.deps import current_user, ledger_service, vault_service
from app.services.ledger import Ledger
from app.services.reports import build_holder_report
from app.services.vault import Vault
from app.utils.clock import to_datetime

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/holders")
def holders_report(
    ledger: Ledger = Depends(ledger_service),
    vault: Vault = Depends(vault_service),
    u: str = Depends(current_user),
):
    now = ledger.now()
    buf = BytesIO()
    build_holder_report(ledger, vault, now, buf)
    buf.seek(0)

    filename = f"holders_{to_datetime(now).strftime('%Y%m%dT%H%M%SZ')}.xlsx"
    return StreamingResponse(
        buf,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
