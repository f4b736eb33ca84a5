"""Runtime configuration for OnlineCampus."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_DB_PATH = "onlinecampus.db"
DEFAULT_PAGE_SIZE = 8

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigError(Exception):
    """Raised when configuration is invalid."""


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def _parse_positive_int(name: str, raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e
    if value < 1:
        raise ConfigError(f"{name} must be >= 1, got {value}")
    return value


@dataclass
class Settings:
    """Application settings.

    Attributes:
        db_path: SQLite database file, or ":memory:".
        page_size: Students per listing page.
        case_sensitive_search: Whether listing search and sort respect case.
    """

    db_path: str = DEFAULT_DB_PATH
    page_size: int = DEFAULT_PAGE_SIZE
    case_sensitive_search: bool = True

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from ONLINECAMPUS_* environment variables.

        Args:
            environ: Mapping to read instead of os.environ.

        Raises:
            ConfigError: If a variable has an invalid value.
        """
        env = os.environ if environ is None else environ
        settings = cls()
        if "ONLINECAMPUS_DB_PATH" in env:
            settings.db_path = env["ONLINECAMPUS_DB_PATH"]
        if "ONLINECAMPUS_PAGE_SIZE" in env:
            settings.page_size = _parse_positive_int(
                "ONLINECAMPUS_PAGE_SIZE", env["ONLINECAMPUS_PAGE_SIZE"]
            )
        if "ONLINECAMPUS_CASE_SENSITIVE_SEARCH" in env:
            settings.case_sensitive_search = _parse_bool(
                "ONLINECAMPUS_CASE_SENSITIVE_SEARCH", env["ONLINECAMPUS_CASE_SENSITIVE_SEARCH"]
            )
        return settings
