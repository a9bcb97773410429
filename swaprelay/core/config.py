# swaprelay/core/config.py
from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # --- Core ---
    DATABASE_URL: str = "sqlite:///./swaprelay.db"
    LOG_LEVEL: str = "INFO"

    # --- Telegram ---
    BOT_TOKEN: str | None = None
    PUBLIC_BASE_URL: str | None = None  # https://relay.example.com (webhooks are mounted below it)

    # --- Helius (upstream webhook filter) ---
    HELIUS_API_KEY: str | None = None
    HELIUS_WEBHOOK_ID: str | None = None
    HELIUS_API_BASE: str = "https://api.helius.xyz"
    HELIUS_CALLBACK_URL: str | None = None  # defaults to PUBLIC_BASE_URL + /webhook
    EMPTY_FILTER_PLACEHOLDER: str = "sample"

    # --- Alerts ---
    ALERT_WEBHOOK_URL: str | None = None  # Discord-compatible incoming webhook
    ALERT_FOOTER_TEXT: str = "Powered by swap-relay"

    HTTP_TIMEOUT_SEC: float = 10.0

    @property
    def helius_callback_url(self) -> str | None:
        if self.HELIUS_CALLBACK_URL:
            return self.HELIUS_CALLBACK_URL
        if self.PUBLIC_BASE_URL:
            return f"{self.PUBLIC_BASE_URL.rstrip('/')}/webhook"
        return None


settings = Settings()
