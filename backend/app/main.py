from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.errors import LedgerError
from app.api.routes.auth import router as auth_router
from app.api.routes.users import router as users_router
from app.api.routes.ledger import router as ledger_router
from app.api.routes.vault import router as vault_router
from app.api.routes.events import router as events_router
from app.api.routes.reports import router as reports_router

app = FastAPI()

origins = [o.strip() for o in (settings.cors_origins or "").split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.code})

@app.get("/health")
@app.get("/api/health")
def health():
    return {"status": "ok"}

app.include_router(auth_router)
app.include_router(users_router)
app.include_router(ledger_router)
app.include_router(vault_router)
app.include_router(events_router)
app.include_router(reports_router)
