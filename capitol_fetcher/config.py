"""
Runtime settings for the fetch pipeline.

Values come from the environment (optionally a .env file loaded by the CLI).
The pipeline receives a FetcherConfig at construction and never reads os.environ itself.
"""
from __future__ import annotations

import os
from dataclasses import asdict, dataclass, replace
from typing import Any, Mapping


LOG_LEVELS = ("error", "warn", "info", "debug")
DEVELOPMENT = "development"
MIN_UPDATE_RETRY_DELAY_MS = 100


class ConfigError(ValueError):
    pass


class ConfigUpdateForbidden(PermissionError):
    pass


def _env_bool(value: str) -> bool:
    # Caching is on unless explicitly "false"; other booleans follow the same rule.
    return value.strip().lower() != "false"


def _env_int(name: str, value: str) -> int:
    try:
        return int(value.strip())
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from e


# env var -> (field name, converter)
_ENV_FIELDS: dict[str, tuple[str, Any]] = {
    "CACHE_ENABLED": ("cache_enabled", lambda n, v: _env_bool(v)),
    "CACHE_TTL": ("cache_ttl_seconds", _env_int),
    "MAX_RETRIES": ("max_retries", _env_int),
    "RETRY_DELAY_MS": ("retry_delay_ms", _env_int),
    "APP_ENV": ("environment", lambda n, v: v.strip().lower()),
    "DEFAULT_PAGE_SIZE": ("default_page_size", _env_int),
    "LOG_LEVEL": ("log_level", lambda n, v: v.strip().lower()),
    "HEADLESS": ("headless", lambda n, v: _env_bool(v)),
    "NAVIGATION_TIMEOUT_MS": ("navigation_timeout_ms", _env_int),
}


@dataclass(frozen=True)
class FetcherConfig:
    cache_enabled: bool = True
    cache_ttl_seconds: int = 3600
    max_retries: int = 3
    retry_delay_ms: int = 1000
    environment: str = "production"
    default_page_size: int = 25
    log_level: str = "info"
    headless: bool = True
    navigation_timeout_ms: int = 30000

    def __post_init__(self):
        _check_ranges(asdict(self))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "FetcherConfig":
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for env_name, (field_name, convert) in _ENV_FIELDS.items():
            raw = env.get(env_name)
            if raw is None or raw == "":
                continue
            values[field_name] = convert(env_name, raw)
        return cls(**values)

    @property
    def is_development(self) -> bool:
        return self.environment == DEVELOPMENT

    def snapshot(self, cache=None) -> dict:
        """
        Public settings view.

        In development mode the cache statistics are included when a cache is given.
        """
        out = asdict(self)
        if self.is_development and cache is not None:
            out["cache_stats"] = cache.stats()
        return out

    def with_overrides(self, **values: Any) -> "FetcherConfig":
        """Return an updated copy. Only allowed in development mode."""
        if not self.is_development:
            raise ConfigUpdateForbidden("configuration updates are only allowed in development mode")
        unknown = sorted(set(values) - set(asdict(self)))
        if unknown:
            raise ConfigError(f"unknown config fields: {unknown}")
        # Runtime updates use the stricter floor of the admin schema.
        if "retry_delay_ms" in values and values["retry_delay_ms"] < MIN_UPDATE_RETRY_DELAY_MS:
            raise ConfigError(f"retry_delay_ms must be >= {MIN_UPDATE_RETRY_DELAY_MS}")
        return replace(self, **values)


def _check_ranges(values: dict) -> None:
    if not 1 <= values["default_page_size"] <= 100:
        raise ConfigError("default_page_size must be between 1 and 100")
    if values["cache_ttl_seconds"] < 1:
        raise ConfigError("cache_ttl_seconds must be >= 1")
    if values["max_retries"] < 0:
        raise ConfigError("max_retries must be >= 0")
    if values["retry_delay_ms"] < 0:
        raise ConfigError("retry_delay_ms must be >= 0")
    if values["navigation_timeout_ms"] < 1:
        raise ConfigError("navigation_timeout_ms must be >= 1")
    if values["log_level"] not in LOG_LEVELS:
        raise ConfigError(f"log_level must be one of {LOG_LEVELS}")
