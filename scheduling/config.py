"""
Centralized configuration with environment variable overrides.

All dealership-specific scheduling values, retry policy, and notification
settings are configurable here. Nothing is hardcoded in engine or tool logic.
"""

import logging
import os
from dataclasses import dataclass, field
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


def _safe_bool(env_var: str, default: str) -> bool:
    """Parse a boolean flag such as ``true``/``0``/``off`` from an env var."""
    raw = os.getenv(env_var, default).strip().lower()
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    raise ValueError(f"Invalid boolean for {env_var}: {raw!r}")


def _safe_int_list(env_var: str, default: str) -> tuple[int, ...]:
    """Parse a comma-separated list of integers, e.g. ``"4,5"``."""
    raw = os.getenv(env_var, default)
    try:
        return tuple(int(part) for part in raw.split(",") if part.strip())
    except ValueError:
        raise ValueError(
            f"Invalid integer list for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class SchedulingConfig:
    """Calendar conventions for the dealership."""

    timezone: str = os.getenv("DEALERSHIP_TIMEZONE", "UTC")
    # 0=Monday .. 6=Sunday, same numbering as date.weekday()
    week_start_day: int = _safe_int("WEEK_START_DAY", "6")
    weekend_days: tuple[int, ...] = _safe_int_list("WEEKEND_DAYS", "4,5")
    alternatives_days_ahead: int = _safe_int("ALTERNATIVES_DAYS_AHEAD", "7")
    max_alternatives: int = _safe_int("MAX_ALTERNATIVES", "5")


@dataclass(frozen=True)
class StoreConfig:
    """Retry policy for transient record store failures."""

    retry_attempts: int = _safe_int("STORE_RETRY_ATTEMPTS", "3")
    retry_base_delay_sec: float = _safe_float("STORE_RETRY_BASE_DELAY", "0.1")


@dataclass(frozen=True)
class NotificationConfig:
    """Booking notification settings."""

    enabled: bool = _safe_bool("NOTIFICATIONS_ENABLED", "true")
    sender: str = os.getenv("NOTIFICATION_SENDER", "bookings@dealership.local")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    scheduling: SchedulingConfig = field(default_factory=SchedulingConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    app_name: str = os.getenv("APP_NAME", "dealer-scheduling")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    try:
        ZoneInfo(config.scheduling.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(
            f"DEALERSHIP_TIMEZONE is not a known timezone: {config.scheduling.timezone!r}"
        ) from None

    if not 0 <= config.scheduling.week_start_day <= 6:
        raise ValueError(
            f"WEEK_START_DAY must be between 0 and 6, got {config.scheduling.week_start_day}"
        )
    for day in config.scheduling.weekend_days:
        if not 0 <= day <= 6:
            raise ValueError(f"WEEKEND_DAYS entries must be between 0 and 6, got {day}")

    if config.scheduling.alternatives_days_ahead < 0:
        raise ValueError(
            "ALTERNATIVES_DAYS_AHEAD must be >= 0, "
            f"got {config.scheduling.alternatives_days_ahead}"
        )
    if config.scheduling.max_alternatives < 0:
        raise ValueError(
            f"MAX_ALTERNATIVES must be >= 0, got {config.scheduling.max_alternatives}"
        )

    if config.store.retry_attempts < 1:
        raise ValueError(
            f"STORE_RETRY_ATTEMPTS must be >= 1, got {config.store.retry_attempts}"
        )
    if config.store.retry_base_delay_sec < 0:
        raise ValueError(
            f"STORE_RETRY_BASE_DELAY must be >= 0, got {config.store.retry_base_delay_sec}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Configuration loaded for '%s'", config.app_name)
    return config


# Singleton instance
settings = load_config()
