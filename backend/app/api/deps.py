from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from app.db.session import SessionLocal
from app.core.security import decode_token
from app.services.authz import RoleAuthorizer
from app.services.custody import build_custody
from app.services.ledger import Ledger
from app.services.vault import Vault
from app.utils.clock import Clock, default_clock

bearer = HTTPBearer()

def db():
    s = SessionLocal()
    try:
        yield s
    finally:
        s.close()

def current_user(creds: HTTPAuthorizationCredentials = Depends(bearer)) -> str:
    try:
        payload = decode_token(creds.credentials)
    except Exception:
        raise HTTPException(status_code=401, detail="invalid_token")
    sub = payload.get("sub")
    if not sub:
        raise HTTPException(status_code=401, detail="invalid_token")
    return sub

def get_clock() -> Clock:
    return default_clock

def authorizer(s: Session = Depends(db)) -> RoleAuthorizer:
    return RoleAuthorizer(s)

def ledger_service(
    s: Session = Depends(db),
    authz: RoleAuthorizer = Depends(authorizer),
    clock: Clock = Depends(get_clock),
) -> Ledger:
    return Ledger(s, authz, clock)

def vault_service(s: Session = Depends(db), ledger: Ledger = Depends(ledger_service)) -> Vault:
    return Vault(s, ledger, build_custody(s))
