"""Application settings loaded from environment variables."""

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root (src/panai_sage/config.py -> .env)
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(env_path)


def _optional_float(name: str) -> float | None:
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else None


def _csv(name: str, default: str) -> list[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


class Settings:
    """
    Runtime configuration.

    Read once per process via get_settings(); tests build their own instance
    and override attributes directly.
    """

    def __init__(self):
        self.app_env: str = os.getenv("APP_ENV", "development")
        self.app_version: str = os.getenv("APP_VERSION", "1.0.0")
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO")
        self.cors_allow_origins: list[str] = _csv("CORS_ALLOW_ORIGINS", "*")

        # Gemini
        self.gemini_api_key: str | None = os.getenv("GEMINI_API_KEY")
        self.gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
        self.gemini_fallback_models: list[str] = _csv(
            "GEMINI_FALLBACK_MODELS", "gemini-1.5-flash,gemini-1.0-pro"
        )

        # Task pipeline
        self.task_workers: int = int(os.getenv("TASK_WORKERS", "4"))
        self.generation_timeout: float | None = _optional_float("GENERATION_TIMEOUT_SECONDS")

        # Eviction (0 disables)
        self.session_ttl_seconds: int = int(os.getenv("SESSION_TTL_SECONDS", "86400"))  # 24 hours
        self.task_ttl_seconds: int = int(os.getenv("TASK_TTL_SECONDS", "3600"))
        self.sweep_interval_seconds: int = int(os.getenv("SWEEP_INTERVAL_SECONDS", "60"))

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
