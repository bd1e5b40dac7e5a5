"""Application configuration helpers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional
import os


DEFAULT_PLAN = "drop-scout"
DEFAULT_SUCCESS_URL = "https://yourdomain.com/success?session_id={CHECKOUT_SESSION_ID}"
DEFAULT_CANCEL_URL = "https://yourdomain.com/cancel"
DEFAULT_STRIPE_API_VERSION = "2023-10-16"


class ConfigurationError(ValueError):
    """Raised when the environment does not describe a usable configuration."""


@dataclass(frozen=True)
class AppConfig:
    """Process-wide settings resolved once at startup."""

    stripe_secret_key: str
    stripe_webhook_secret: str
    database_url: str
    stripe_api_version: str
    discord_webhook_url: Optional[str]
    notify_token: Optional[str]
    port: int
    default_plan: str
    checkout_success_url: str
    checkout_cancel_url: str
    db_pool_min_size: int
    db_pool_max_size: int
    db_connect_timeout: float
    db_command_timeout: float
    log_level: str

    @property
    def notifications_enabled(self) -> bool:
        return bool(self.discord_webhook_url)


def _optional(env: Mapping[str, str], name: str) -> Optional[str]:
    value = env.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _required(env: Mapping[str, str], name: str) -> str:
    value = _optional(env, name)
    if value is None:
        raise ConfigurationError(f"{name} must be set")
    return value


def _to_int(env: Mapping[str, str], name: str, *, default: int) -> int:
    value = _optional(env, name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from exc


def _to_float(env: Mapping[str, str], name: str, *, default: float) -> float:
    value = _optional(env, name)
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from exc
    if parsed < 0:
        raise ConfigurationError(f"{name} must be non-negative")
    return parsed


def load_app_config(env: Optional[Mapping[str, str]] = None) -> AppConfig:
    """Load :class:`AppConfig` from environment variables."""

    env_mapping = os.environ if env is None else env

    pool_min_size = max(1, _to_int(env_mapping, "DB_POOL_MIN_SIZE", default=1))
    pool_max_size = _to_int(env_mapping, "DB_POOL_MAX_SIZE", default=10)
    if pool_max_size < pool_min_size:
        raise ConfigurationError("DB_POOL_MAX_SIZE must be >= DB_POOL_MIN_SIZE")

    return AppConfig(
        stripe_secret_key=_required(env_mapping, "STRIPE_SECRET_KEY"),
        stripe_webhook_secret=_required(env_mapping, "STRIPE_WEBHOOK_SECRET"),
        database_url=_required(env_mapping, "DATABASE_URL"),
        stripe_api_version=_optional(env_mapping, "STRIPE_API_VERSION") or DEFAULT_STRIPE_API_VERSION,
        discord_webhook_url=_optional(env_mapping, "DISCORD_WEBHOOK_URL"),
        notify_token=_optional(env_mapping, "RENDER_NOTIFY_TOKEN"),
        port=_to_int(env_mapping, "PORT", default=10000),
        default_plan=_optional(env_mapping, "DEFAULT_PLAN") or DEFAULT_PLAN,
        checkout_success_url=_optional(env_mapping, "CHECKOUT_SUCCESS_URL") or DEFAULT_SUCCESS_URL,
        checkout_cancel_url=_optional(env_mapping, "CHECKOUT_CANCEL_URL") or DEFAULT_CANCEL_URL,
        db_pool_min_size=pool_min_size,
        db_pool_max_size=pool_max_size,
        db_connect_timeout=_to_float(env_mapping, "DB_CONNECT_TIMEOUT", default=5.0),
        db_command_timeout=_to_float(env_mapping, "DB_COMMAND_TIMEOUT", default=10.0),
        log_level=(_optional(env_mapping, "LOG_LEVEL") or "INFO").upper(),
    )


__all__ = [
    "AppConfig",
    "ConfigurationError",
    "DEFAULT_CANCEL_URL",
    "DEFAULT_PLAN",
    "DEFAULT_STRIPE_API_VERSION",
    "DEFAULT_SUCCESS_URL",
    "load_app_config",
]
