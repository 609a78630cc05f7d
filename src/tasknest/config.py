# src/tasknest/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
- Everything has a default, so the demo runs without any configuration.
"""

from __future__ import annotations

import calendar
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_PREFIX = "TASKNEST"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


_WEEKDAYS = {
    "monday": calendar.MONDAY,
    "tuesday": calendar.TUESDAY,
    "wednesday": calendar.WEDNESDAY,
    "thursday": calendar.THURSDAY,
    "friday": calendar.FRIDAY,
    "saturday": calendar.SATURDAY,
    "sunday": calendar.SUNDAY,
}


def parse_weekday(raw: str | None, default: int = calendar.SUNDAY) -> int:
    """Accept a weekday name ("sunday", "mon") or a calendar index (MONDAY=0)."""
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value.isdigit():
        n = int(value)
        return n if 0 <= n <= 6 else default
    for name, idx in _WEEKDAYS.items():
        if name.startswith(value[:3]):
            return idx
    return default


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Task API ----
    api_url: Optional[str]
    api_token: Optional[str]
    request_timeout_seconds: float
    page_limit: int

    # ---- Locale / views ----
    locale: str
    first_weekday: int
    calendar_pad_weeks: bool

    # ---- Connectors ----
    console_enabled: bool

    @property
    def offline(self) -> bool:
        return not self.api_url

    @staticmethod
    def from_env() -> "Settings":
        api_url = _env(_k("API_URL")).strip() or None
        api_token = _env(_k("API_TOKEN")).strip() or None

        return Settings(
            app_name=_env(_k("APP_NAME"), "tasknest") or "tasknest",
            log_level=_env(_k("LOG_LEVEL"), "INFO"),
            data_dir=_env_path(_k("DATA_DIR"), Path(".local/tasknest")),
            api_url=api_url,
            api_token=api_token,
            request_timeout_seconds=max(1.0, _env_float(_k("REQUEST_TIMEOUT_SECONDS"), 10.0)),
            page_limit=max(1, _env_int(_k("PAGE_LIMIT"), 20)),
            locale=_env(_k("LOCALE"), "he").strip() or "he",
            first_weekday=parse_weekday(os.getenv(_k("FIRST_WEEKDAY")), calendar.SUNDAY),
            calendar_pad_weeks=_env_bool(_k("CALENDAR_PAD_WEEKS"), False),
            console_enabled=_env_bool(_k("CONSOLE_ENABLED"), True),
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
