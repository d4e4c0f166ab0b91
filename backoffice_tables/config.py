from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from backoffice_tables.exceptions import ConfigError

DEFAULT_SEARCH_DEBOUNCE_MS = 300
DEFAULT_PAGE_SIZE = 10
PAGE_SIZE_OPTIONS: tuple[int, ...] = (5, 10, 20, 30, 40, 50)


@dataclass(frozen=True)
class TableConfig:
    api_base_url: str = ""
    timeout_seconds: float = 20.0
    search_debounce_ms: int = DEFAULT_SEARCH_DEBOUNCE_MS
    default_page_size: int = DEFAULT_PAGE_SIZE
    retry_max_attempts: int = 3
    retry_backoff_ms: int = 150

    @classmethod
    def from_env(cls, env_file: str | None = ".env") -> "TableConfig":
        """Load config from environment with optional .env override."""
        if env_file:
            load_dotenv(env_file, override=False)
        config = cls(
            api_base_url=(os.getenv("BACKOFFICE_API_BASE_URL") or "").strip(),
            timeout_seconds=_read_float("BACKOFFICE_TIMEOUT_SECONDS", "20"),
            search_debounce_ms=_read_int("BACKOFFICE_SEARCH_DEBOUNCE_MS", str(DEFAULT_SEARCH_DEBOUNCE_MS)),
            default_page_size=_read_int("BACKOFFICE_DEFAULT_PAGE_SIZE", str(DEFAULT_PAGE_SIZE)),
            retry_max_attempts=_read_int("BACKOFFICE_RETRY_MAX_ATTEMPTS", "3"),
            retry_backoff_ms=_read_int("BACKOFFICE_RETRY_BACKOFF_MS", "150"),
        )
        config.validate()
        return config

    def validate(self) -> None:
        if self.timeout_seconds <= 0:
            raise ConfigError(f"Invalid BACKOFFICE_TIMEOUT_SECONDS: expected > 0, got {self.timeout_seconds}")
        if self.search_debounce_ms < 0:
            raise ConfigError(f"Invalid BACKOFFICE_SEARCH_DEBOUNCE_MS: expected >= 0, got {self.search_debounce_ms}")
        if self.default_page_size < 1:
            raise ConfigError(f"Invalid BACKOFFICE_DEFAULT_PAGE_SIZE: expected >= 1, got {self.default_page_size}")
        if self.retry_max_attempts < 1:
            raise ConfigError(f"Invalid BACKOFFICE_RETRY_MAX_ATTEMPTS: expected >= 1, got {self.retry_max_attempts}")
        if self.retry_backoff_ms < 0:
            raise ConfigError(f"Invalid BACKOFFICE_RETRY_BACKOFF_MS: expected >= 0, got {self.retry_backoff_ms}")

    def require_api(self) -> str:
        if not self.api_base_url:
            raise ConfigError("BACKOFFICE_API_BASE_URL is required for server search and bulk delete")
        return self.api_base_url.rstrip("/")


def _read_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected a number, got {raw!r}") from exc


def _read_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected an integer, got {raw!r}") from exc
