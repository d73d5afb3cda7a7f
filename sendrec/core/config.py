"""
Configuration helpers for the SendRec waitlist service.

Routers/services read settings through ``get_settings()`` instead of fetching
os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    host: str
    port: int
    data_file: str
    log_level: str
    cors_origins: tuple[str, ...]


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _level(value: str | None) -> str:
        level = (value or "INFO").strip().upper()
        if level == "WARN":
            level = "WARNING"
        return level if level in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"} else "INFO"

    def _csv(value: str | None) -> tuple[str, ...]:
        if not value:
            return ()
        return tuple(item.strip().rstrip("/") for item in value.split(",") if item.strip())

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        host=os.getenv("HOST") or "0.0.0.0",
        port=_int(os.getenv("PORT", "8080"), 8080),
        data_file=os.getenv("WAITLIST_DATA_FILE") or os.path.join(".", "data", "waitlist.json"),
        log_level=_level(os.getenv("LOG_LEVEL")),
        cors_origins=_csv(os.getenv("CORS_ORIGINS")),
    )
