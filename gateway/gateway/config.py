"""Environment-driven settings.

Values are read from the process environment; the entry point loads a
``.env`` file from the working directory first.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

DEFAULT_HTTP_TIMEOUT = 10.0  # seconds
DEFAULT_AUDIT_MAX_ENTRIES = 1000
DEFAULT_AUDIT_WINDOW = 24 * 60 * 60.0  # seconds


class ConfigurationError(Exception):
    """Raised when a handler needs a setting that is not configured."""


def _float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{key} must be a number, got {raw!r}") from exc


def _positive_int(env: Mapping[str, str], key: str, default: int) -> int:
    value = int(_float(env, key, default))
    if value < 1:
        raise ConfigurationError(f"{key} must be at least 1, got {value}")
    return value


@dataclass(frozen=True, slots=True)
class Settings:
    supabase_url: str | None = None
    supabase_key: str | None = None
    webhook_url: str | None = None
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    audit_max_entries: int = DEFAULT_AUDIT_MAX_ENTRIES
    audit_window_seconds: float = DEFAULT_AUDIT_WINDOW
    log_level: str = "INFO"

    @property
    def database_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if env is None else env
        return cls(
            supabase_url=env.get("SUPABASE_URL") or None,
            supabase_key=env.get("SUPABASE_ANON_KEY") or None,
            webhook_url=env.get("N8N_WEBHOOK_URL") or None,
            http_timeout=_float(env, "HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
            audit_max_entries=_positive_int(env, "AUDIT_MAX_ENTRIES", DEFAULT_AUDIT_MAX_ENTRIES),
            audit_window_seconds=_float(env, "AUDIT_WINDOW_SECONDS", DEFAULT_AUDIT_WINDOW),
            log_level=env.get("LOG_LEVEL", "INFO"),
        )
