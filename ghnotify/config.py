"""the beautiful world start from here."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv
from fastapi import Request

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """App Settings"""

    bot_token: str = ""
    port: int = 3000
    webhook_secret: str = ""
    telegram_api_base: str = "https://api.telegram.org"
    telegram_timeout: float = 15.0
    log_level: str = "INFO"
    log_json: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from the process environment (and `.env`)."""
        return cls(
            bot_token=os.getenv("BOT_TOKEN", "").strip(),
            port=int(os.getenv("PORT") or "3000"),
            webhook_secret=os.getenv("GITHUB_WEBHOOK_SECRET", ""),
            telegram_api_base=os.getenv(
                "TELEGRAM_API_BASE", "https://api.telegram.org"
            ).rstrip("/"),
            telegram_timeout=float(os.getenv("TELEGRAM_TIMEOUT") or "15"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_json=_env_bool("LOG_JSON"),
        )


def get_settings(request: Request) -> Settings:
    """FastAPI dependency: the settings the app was created with."""
    return request.app.state.settings
