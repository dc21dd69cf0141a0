"""Centralized settings for naming-spine.

One validated, cached settings object holds every tunable the CLI and the
linter read.  Values come from ``NAMING_*`` environment variables or a
``.env`` file; CLI options override them per invocation.

Examples:
    >>> from naming_spine.core.settings import get_settings
    >>> get_settings().max_identifier_length
    63

Tags:
    naming-spine, configuration, settings, pydantic

Doc-Types:
    api-reference
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class NamingSettings(BaseSettings):
    """naming-spine configuration.

    All fields can be set via ``NAMING_*`` environment variables (e.g.
    ``NAMING_DEFAULT_CONVENTION=pascal``) or through a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="NAMING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="WARNING")
    log_format: Literal["console", "json"] = Field(default="console")

    # ── Conventions ──────────────────────────────────────────────
    default_convention: str = Field(
        default="both",
        description="What 'render' prints when --convention is omitted: snake, pascal or both",
    )

    # PostgreSQL truncates identifiers to NAMEDATALEN - 1 bytes
    max_identifier_length: int = Field(default=63, ge=1)

    # ── Linting ──────────────────────────────────────────────────
    strict: bool = Field(default=False, description="Treat lint warnings as failures")

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        v = v.upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return v

    @field_validator("default_convention")
    @classmethod
    def _known_convention(cls, v: str) -> str:
        if v.strip().lower() == "both":
            return "both"
        from naming_spine.conventions.kinds import Convention

        return Convention.parse(v).value


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, NamingSettings] = {}


def get_settings(*, _force_reload: bool = False) -> NamingSettings:
    """Load, validate, and cache a :class:`NamingSettings` instance."""
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]
    settings = NamingSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()
