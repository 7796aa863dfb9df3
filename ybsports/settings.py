from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)
_SETTINGS: AppSettings | None = None

DEFAULT_TIMEZONE = "Asia/Seoul"
DEFAULT_DATABASE_URL = "sqlite:///./ybsports.db"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


@dataclass(frozen=True)
class AppSettings:
    database_url: str
    log_level: str
    timezone: str
    kbo_source: str
    kbo_fetch_timeout_seconds: int
    kbo_user_agent: str
    kbo_api_key: str
    kbo_default_today: bool
    chat_history_size: int
    cors_origins: tuple[str, ...]


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("%s=%r is not an integer. Using %s.", name, raw, default)
        return default
    if value < 1:
        logger.warning("%s must be >= 1. Using %s.", name, default)
        return default
    return value


def _env_bool(name: str, default: bool = False) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def _env_timezone(name: str, default: str = DEFAULT_TIMEZONE) -> str:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        ZoneInfo(raw)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("%s=%r is not a known time zone. Using %s.", name, raw, default)
        return default
    return raw


def _parse_origins(raw: str) -> tuple[str, ...]:
    origins = tuple(origin.strip() for origin in raw.split(",") if origin.strip())
    return origins or ("*",)


def load_settings() -> AppSettings:
    return AppSettings(
        database_url=(os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL).strip(),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper(),
        timezone=_env_timezone("APP_TIMEZONE"),
        kbo_source=(os.getenv("KBO_SOURCE") or "json").strip().lower(),
        kbo_fetch_timeout_seconds=_env_int("KBO_FETCH_TIMEOUT_SECONDS", 10),
        kbo_user_agent=(os.getenv("KBO_USER_AGENT") or DEFAULT_USER_AGENT).strip(),
        kbo_api_key=(os.getenv("KBO_API_KEY") or "").strip(),
        kbo_default_today=_env_bool("KBO_DEFAULT_TODAY"),
        chat_history_size=_env_int("CHAT_HISTORY_SIZE", 50),
        cors_origins=_parse_origins(os.getenv("CORS_ORIGINS") or "*"),
    )


def get_settings() -> AppSettings:
    global _SETTINGS
    if _SETTINGS is not None:
        return _SETTINGS
    _SETTINGS = load_settings()
    return _SETTINGS


def reset_settings() -> None:
    """Drop the cached snapshot so the next call re-reads the environment."""
    global _SETTINGS
    _SETTINGS = None
