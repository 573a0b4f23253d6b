from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .lifecycle import DEFAULT_SWEEP_INTERVAL_SECONDS


class ConfigError(RuntimeError):
    """Raised when required runtime configuration is missing or invalid."""


class MissingCredentialError(ConfigError):
    """Raised when the bot token is not configured."""


@dataclass(slots=True)
class Settings:
    telegram_bot_token: str
    sweep_interval_seconds: float
    log_level: str


def _load_env_file(path: Path) -> None:
    if not path.exists():
        return
    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        os.environ.setdefault(key, value)


def _require_credential(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise MissingCredentialError(f"Missing required environment variable: {name}")
    return value


def _get_positive_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError as exc:
        raise ConfigError(f"Invalid number for {name}: {value}") from exc
    if parsed <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return parsed


def load_settings(env_file: Path = Path(".env")) -> Settings:
    _load_env_file(env_file)
    return Settings(
        telegram_bot_token=_require_credential("TELEGRAM_BOT_TOKEN"),
        sweep_interval_seconds=_get_positive_float("SWEEP_INTERVAL_SECONDS", DEFAULT_SWEEP_INTERVAL_SECONDS),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
