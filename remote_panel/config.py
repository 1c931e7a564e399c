"""
remote_panel/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

SHEETS_READONLY_SCOPE = "https://www.googleapis.com/auth/spreadsheets.readonly"
DEFAULT_SOURCES_CONFIG_PATH = Path(__file__).resolve().parent / "registry" / "sources.json"


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _resolve_config_path(raw_path: str) -> Path:
    candidate = Path(raw_path)
    if candidate.is_absolute():
        return candidate
    return (Path(__file__).resolve().parents[1] / candidate).resolve()


@dataclass(frozen=True)
class GoogleSheetsSettings:
    """
    Credentials and request shape for the Google Sheets client.
    """

    credentials_path: str | None = None
    credentials_json: str | None = None
    application_name: str = "Panel General Remotos"
    base_url: str = "https://sheets.googleapis.com/v4/spreadsheets"
    range_spec: str = "A:T"
    probe_source: str | None = None
    scopes: tuple[str, ...] = (SHEETS_READONLY_SCOPE,)


@dataclass(frozen=True)
class SheetsHTTPSettings:
    """
    Shared HTTP behavior settings for the Sheets connector.
    """

    timeout_seconds: float = 15.0
    max_retries: int = 0
    backoff_initial_seconds: float = 0.5
    backoff_multiplier: float = 2.0
    rate_limit_per_second: float = 5.0


@dataclass(frozen=True)
class SyncSettings:
    """
    Runtime settings for sheet sync cycles and the periodic scheduler.
    """

    sources_config_path: str = str(DEFAULT_SOURCES_CONFIG_PATH)
    source_timeout_seconds: float = 60.0
    stale_after_minutes: int = 30
    daily_call_goal: int = 60
    scheduler_enabled: bool = True
    interval_minutes: int = 30


@lru_cache(maxsize=1)
def get_google_sheets_settings() -> GoogleSheetsSettings:
    """
    Return Google Sheets client settings from environment variables.
    """

    credentials_path = _get_optional_str_env("GOOGLE_SHEETS_CREDENTIALS_PATH")
    return GoogleSheetsSettings(
        credentials_path=str(_resolve_config_path(credentials_path)) if credentials_path else None,
        credentials_json=_get_optional_str_env("GOOGLE_SHEETS_CREDENTIALS_JSON"),
        application_name=_get_str_env("GOOGLE_SHEETS_APPLICATION_NAME", "Panel General Remotos"),
        base_url=_get_str_env(
            "GOOGLE_SHEETS_BASE_URL",
            "https://sheets.googleapis.com/v4/spreadsheets",
        ).rstrip("/"),
        range_spec=_get_str_env("GOOGLE_SHEETS_RANGE", "A:T"),
        probe_source=_get_optional_str_env("GOOGLE_SHEETS_PROBE_SOURCE"),
    )


@lru_cache(maxsize=1)
def get_sheets_http_settings() -> SheetsHTTPSettings:
    """
    Return Sheets connector HTTP settings from environment variables.
    """

    return SheetsHTTPSettings(
        timeout_seconds=max(1.0, _get_float_env("SHEETS_HTTP_TIMEOUT_SECONDS", 15.0)),
        max_retries=max(0, _get_int_env("SHEETS_HTTP_MAX_RETRIES", 0)),
        backoff_initial_seconds=max(0.1, _get_float_env("SHEETS_HTTP_BACKOFF_INITIAL_SECONDS", 0.5)),
        backoff_multiplier=max(1.0, _get_float_env("SHEETS_HTTP_BACKOFF_MULTIPLIER", 2.0)),
        rate_limit_per_second=max(0.1, _get_float_env("SHEETS_HTTP_RATE_LIMIT_PER_SECOND", 5.0)),
    )


@lru_cache(maxsize=1)
def get_sync_settings() -> SyncSettings:
    """
    Return sync orchestration settings from environment variables.
    """

    return SyncSettings(
        sources_config_path=str(
            _resolve_config_path(
                _get_str_env("SHEET_SOURCES_CONFIG_PATH", str(DEFAULT_SOURCES_CONFIG_PATH))
            )
        ),
        source_timeout_seconds=max(1.0, _get_float_env("SYNC_SOURCE_TIMEOUT_SECONDS", 60.0)),
        stale_after_minutes=max(1, _get_int_env("SYNC_STALE_AFTER_MINUTES", 30)),
        daily_call_goal=max(0, _get_int_env("CALLS_DAILY_GOAL", 60)),
        scheduler_enabled=_get_bool_env("SYNC_SCHEDULER_ENABLED", True),
        interval_minutes=max(1, _get_int_env("SYNC_INTERVAL_MINUTES", 30)),
    )
