from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Cashbook"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"
    database_url: str = "postgresql+asyncpg://cashbook:cashbook@db:5432/cashbook"
    cors_origins: list[str] = ["*"]
    cors_allow_headers: list[str] = ["authorization", "x-client-info", "apikey", "content-type"]
    cors_max_age: int = 600

    # Connection pool, ignored for SQLite URLs.
    db_pool_size: int = 5
    db_max_overflow: int = 10

    # Receipt storage. An empty receipts_dir keeps uploads in memory.
    receipts_bucket: str = "receipts"
    receipts_dir: str = ""
    public_storage_url: str = "http://localhost:8000/storage"

    # Employee ID allocation (5-digit range).
    employee_id_start: int = 10000
    employee_id_max: int = 99999
    employee_id_allocation_attempts: int = 3

    # First admin account, created on startup when both values are set.
    bootstrap_admin_email: str = ""
    bootstrap_admin_password: str = ""
    bootstrap_admin_name: str = "Administrator"


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
