"""Configuration loading: TOML file + environment variables."""

from __future__ import annotations

import os
from pathlib import Path

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib  # type: ignore[no-redef]

from flowguess.errors import ConfigError
from flowguess.models.config import ServiceConfig
from flowguess.models.stats import SortBy


def _sort_by(value: str) -> SortBy:
    try:
        return SortBy(value)
    except ValueError:
        valid = ", ".join(s.value for s in SortBy)
        raise ConfigError(f"Invalid sort key '{value}' (expected one of: {valid})") from None


def _number(name: str, value, cast=float):
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid {name}: {value!r} (expected a number)") from None


def _positive(name: str, value: float) -> float:
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


def load_config(
    config_path: str | Path | None = None,
    env_prefix: str = "FLOWGUESS_",
) -> ServiceConfig:
    """Load service configuration from a TOML file and env vars.

    Priority (highest wins):
        1. Environment variables (FLOWGUESS_BASE_URL, etc.)
        2. TOML config file
        3. Defaults from ServiceConfig
    """
    raw: dict = {}
    if config_path is not None:
        p = Path(config_path).expanduser()
        if p.exists():
            with open(p, "rb") as f:
                try:
                    raw = tomllib.load(f)
                except tomllib.TOMLDecodeError as exc:
                    raise ConfigError(f"Invalid config file {p}: {exc}") from exc

    cfg = ServiceConfig()

    # ── Explorer section ───────────────────────────────────
    explorer = raw.get("explorer", {})
    if v := explorer.get("base_url"):
        cfg.base_url = str(v)
    if v := explorer.get("contract_address"):
        cfg.contract_address = str(v)
    if (v := explorer.get("request_timeout")) is not None:
        cfg.request_timeout = _positive("request_timeout", _number("request_timeout", v))
    if (v := explorer.get("fetch_retries")) is not None:
        cfg.fetch_retries = _positive("fetch_retries", _number("fetch_retries", v, int))
    if (v := explorer.get("retry_backoff")) is not None:
        cfg.retry_backoff = _number("retry_backoff", v)
    if (v := explorer.get("page_delay")) is not None:
        cfg.page_delay = _number("page_delay", v)

    # ── Cache section ──────────────────────────────────────
    cache = raw.get("cache", {})
    if (v := cache.get("ttl")) is not None:
        cfg.cache_ttl = _positive("cache ttl", _number("cache ttl", v))

    # ── Leaderboard section ────────────────────────────────
    board = raw.get("leaderboard", {})
    if v := board.get("default_sort"):
        cfg.default_sort = _sort_by(str(v))
    if (v := board.get("top_limit")) is not None:
        cfg.top_limit = _number("top_limit", v, int)

    # ── Watch section ──────────────────────────────────────
    watch = raw.get("watch", {})
    if (v := watch.get("refresh_interval")) is not None:
        cfg.refresh_interval = _positive("refresh_interval", _number("refresh_interval", v, int))
    if (v := watch.get("error_backoff")) is not None:
        cfg.error_backoff = _number("error_backoff", v, int)

    # ── Logging section ────────────────────────────────────
    logging_raw = raw.get("logging", {})
    if v := logging_raw.get("level"):
        cfg.log_level = str(v)

    # ── Environment variable overrides (highest priority) ──
    if url := os.environ.get(f"{env_prefix}BASE_URL"):
        cfg.base_url = url
    if addr := os.environ.get(f"{env_prefix}CONTRACT_ADDRESS"):
        cfg.contract_address = addr
    if ttl := os.environ.get(f"{env_prefix}CACHE_TTL"):
        cfg.cache_ttl = _positive(f"{env_prefix}CACHE_TTL", _number(f"{env_prefix}CACHE_TTL", ttl))
    if level := os.environ.get(f"{env_prefix}LOG_LEVEL"):
        cfg.log_level = level

    return cfg
