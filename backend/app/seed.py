import os
from sqlalchemy import select
from app.core.config import settings
from app.core.security import hash_password
from app.db.session import SessionLocal, atomic
from app.models.user import User
from app.services.authz import MINT_BURN, OWNER, RoleAuthorizer
from app.services.ledger_state import get_ledger_state, get_vault_state

def seed(db, username: str, password: str, vault_identity: str | None = None):
    with atomic(db):
        get_ledger_state(db, settings.initial_global_rate)
        get_vault_state(db)

        existing = db.execute(select(User).where(User.username == username)).scalar_one_or_none()
        if existing is None:
            db.add(User(username=username, password_hash=hash_password(password)))
            db.flush()

        authz = RoleAuthorizer(db)
        authz.grant(username, OWNER)
        authz.grant(vault_identity or settings.vault_identity, MINT_BURN)

def main():
    username = os.environ.get("SEED_ADMIN_USER", "admin")
    password = os.environ.get("SEED_ADMIN_PASS", "admin123")

    db = SessionLocal()
    try:
        seed(db, username, password)
    finally:
        db.close()

if __name__ == "__main__":
    main()
