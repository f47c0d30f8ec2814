from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from urllib.parse import unquote, urlparse

DEFAULT_CHANNEL = "presentation"
DEFAULT_STATIC_DIR = "dist"


class SettingsError(ValueError):
    pass


@dataclass(frozen=True)
class BrokerSettings:
    app_id: str
    key: str
    secret: str
    cluster: str
    channel: str


@dataclass(frozen=True)
class DatabaseSettings:
    app_id: str
    master_key: str
    server_url: str


@dataclass(frozen=True)
class AppSettings:
    static_dir: Path
    log_level: str


def _require_env(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise SettingsError(f"Missing required environment variable: {name}")
    return value


def _optional_env(name: str) -> str | None:
    value = os.getenv(name, "").strip()
    return value or None


def _parse_database_url(value: str) -> DatabaseSettings:
    parsed = urlparse(value)
    if parsed.scheme not in {"http", "https"} or not parsed.hostname:
        raise SettingsError(f"Invalid URL for DATABASE_URL: {parsed.scheme}://{parsed.hostname}")
    if not parsed.username or not parsed.password:
        raise SettingsError("DATABASE_URL must carry credentials as <app_id>:<master_key>@")
    netloc = parsed.hostname
    if parsed.port:
        netloc = f"{netloc}:{parsed.port}"
    return DatabaseSettings(
        app_id=unquote(parsed.username),
        master_key=unquote(parsed.password),
        server_url=f"{parsed.scheme}://{netloc}",
    )


def load_broker_settings() -> BrokerSettings:
    return BrokerSettings(
        app_id=_require_env("PUSHER_APP_ID"),
        key=_require_env("PUSHER_KEY"),
        secret=_require_env("PUSHER_SECRET"),
        cluster=_require_env("PUSHER_CLUSTER"),
        channel=_optional_env("PUSHER_CHANNEL") or DEFAULT_CHANNEL,
    )


def load_database_settings() -> DatabaseSettings:
    return _parse_database_url(_require_env("DATABASE_URL"))


def load_app_settings() -> AppSettings:
    static_dir = Path(_optional_env("STATIC_DIR") or DEFAULT_STATIC_DIR)
    log_level = (_optional_env("LOG_LEVEL") or "INFO").upper()
    if log_level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise SettingsError(f"Invalid LOG_LEVEL: {log_level}")
    return AppSettings(static_dir=static_dir, log_level=log_level)
