from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    database_url: str = "sqlite+pysqlite:///./ledger.db"
    jwt_secret: str = "dev-secret-change-me-0123456789abcdef"
    jwt_expires_min: int = 120
    cors_origins: str = "http://localhost:5173"

    # per-second growth fraction scaled by 10**18; ~5% simple annual
    initial_global_rate: int = 1_585_489_599
    ledger_address: str = "credit-ledger"
    vault_identity: str = "vault"

    payout_url: str | None = None
    payout_timeout_seconds: float = 10.0

    class Config:
        env_prefix = ""
        case_sensitive = False
        env_file = ".env"

settings = Settings()
