"""Application configuration classes."""

from __future__ import annotations

import os

DEFAULT_REPORT_SYMBOLS = "EUR,GBP,JPY,CHF,AUD,CAD"


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name)
    return value if value is not None else default


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "fx-intel"
    AGENT_VERSION = _get_env("AGENT_VERSION", "1.0.0")
    AGENT_DESCRIPTION = _get_env(
        "AGENT_DESCRIPTION",
        "Real-time FX/currency intelligence - live rates, conversions, historical data, "
        "volatility analysis. ECB-sourced data for financial agents.",
    )
    SECRET_KEY = _get_env("SECRET_KEY", "change-me")
    REQUEST_TIMEOUT_SECONDS = float(_get_env("REQUEST_TIMEOUT_SECONDS", "10"))
    FRANKFURTER_API_BASE_URL = _get_env("FRANKFURTER_API_BASE_URL", "https://api.frankfurter.dev/v1")
    FANOUT_MAX_WORKERS = int(_get_env("FANOUT_MAX_WORKERS", "4"))
    REPORT_SYMBOLS = _get_env("REPORT_SYMBOLS", DEFAULT_REPORT_SYMBOLS)
    REPORT_WINDOW_DAYS = int(_get_env("REPORT_WINDOW_DAYS", "30"))
    PUBLIC_DOMAIN: str | None = os.getenv("PUBLIC_DOMAIN") or os.getenv("RAILWAY_PUBLIC_DOMAIN")
    DEFAULT_PUBLIC_URL = _get_env("DEFAULT_PUBLIC_URL", "https://fx-intel-production.up.railway.app")
    ICON_PATH = _get_env("ICON_PATH", "icon.png")
    PAYMENTS_ENABLED = _get_env("PAYMENTS_ENABLED", "false").lower() == "true"
    PAYMENTS_CURRENCY = _get_env("PAYMENTS_CURRENCY", "USDC")
    PAYMENTS_NETWORK = _get_env("PAYMENTS_NETWORK", "base")
    PAYMENTS_PAY_TO: str | None = os.getenv("PAYMENTS_PAY_TO")
    ENTRYPOINT_PRICE_OVERRIDES = _get_env("ENTRYPOINT_PRICE_OVERRIDES", "")
    ANALYTICS_ENABLED = _get_env("ANALYTICS_ENABLED", "true").lower() == "true"
    LOG_LEVEL = _get_env("LOG_LEVEL", "INFO")
    LOG_JSON_ENABLED = _get_env("LOG_JSON_ENABLED", "false").lower() == "true"
    LOG_FORMAT = _get_env("LOG_FORMAT", "%(asctime)s %(levelname)s [%(name)s] %(message)s")


class DevelopmentConfig(BaseConfig):
    """Configuration for local development."""

    DEBUG = True
    TESTING = False


class ProductionConfig(BaseConfig):
    """Configuration for production deployments."""

    DEBUG = False
    TESTING = False
    PAYMENTS_ENABLED = _get_env("PAYMENTS_ENABLED", "true").lower() == "true"


CONFIG_BY_ENV = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
}


def get_config(config_name: str | None = None) -> type[BaseConfig]:
    """Return the config class for the requested environment.

    Args:
        config_name: Optional explicit config identifier. If omitted, the
            APP_ENV environment variable is consulted.

    Raises:
        KeyError: If the requested configuration is not defined.
    """

    env_candidate = config_name if config_name is not None else os.getenv("APP_ENV", "development")
    env_name = (env_candidate or "development").lower()
    try:
        config_cls = CONFIG_BY_ENV[env_name]
    except KeyError as exc:
        raise KeyError(f"Unknown APP_ENV '{env_name}'") from exc

    _validate_report_settings(config_cls)
    return config_cls


def _validate_report_settings(config_cls: type[BaseConfig]) -> None:
    if config_cls.REPORT_WINDOW_DAYS <= 0:
        raise ValueError(
            f"REPORT_WINDOW_DAYS must be a positive integer, got {config_cls.REPORT_WINDOW_DAYS}"
        )
    if config_cls.FANOUT_MAX_WORKERS <= 0:
        raise ValueError(
            f"FANOUT_MAX_WORKERS must be a positive integer, got {config_cls.FANOUT_MAX_WORKERS}"
        )
    if not config_cls.REPORT_SYMBOLS.strip():
        raise ValueError("REPORT_SYMBOLS must list at least one currency code")
