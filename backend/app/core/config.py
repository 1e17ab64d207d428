from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "Invoice Ledger"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # In-memory by default; every session shares one connection
    APP_DATABASE_DSN: str = "sqlite://"
    REDIS_URL: str = "redis://localhost:6379"

    # Invoicing policy
    TAX_RATE: Decimal = Decimal("0.10")
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # Demo fixtures loaded on startup
    SEED_FIXTURES: bool = True

    # Seconds between overdue sweeps in the API process; 0 disables the loop
    STATUS_REFRESH_INTERVAL_SECONDS: float = 900.0

    # Cosmetic delay applied inside the ledger's critical section
    SIMULATED_LATENCY_SECONDS: float = 0.0

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    @property
    def version(self) -> str:
        return "0.1.0"


settings = Settings()
