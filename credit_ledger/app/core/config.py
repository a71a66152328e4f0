from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Credit Ledger API"
    database_url: str = "sqlite:///credit_ledger.db"
    log_level: str = "INFO"

    # Outgoing mail
    smtp_host: str = "localhost"
    smtp_port: int = 465
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_use_ssl: bool = True
    smtp_timeout: float = 10.0
    mail_from_address: str = "no-reply@example.com"
    mail_from_name: str = "Credit Ledger"
    mail_unsubscribe_address: Optional[str] = None

    # Notification content
    dashboard_url: str = "http://localhost:3000/user-dashboard"
    currency_symbol: str = "₱"

    history_default_limit: int = 10

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CREDITS_",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
