"""Settings for calendar-spine.

Applications that build calendars from configuration (the CLI, services
reading events from files) share a handful of knobs: which locale decides
week numbering, which timezone naive timestamps live in, and which event
fields hold the start and end dates. ``CalendarSettings`` collects them.

Manifesto:
    Configuration should be explicit, validated, and environment-driven.

    - **Pydantic validation:** Unknown locales and timezones fail at startup
    - **Environment-driven:** Reads ``CALENDAR_*`` env vars and ``.env`` files
    - **Opt-in:** ``Calendar(...)`` never reads settings implicitly; use
      ``Calendar.from_settings()``

Examples:
    >>> from calendar_spine.core.settings import get_settings
    >>> settings = get_settings()
    >>> settings.locale
    'en'

Tags:
    settings, configuration, pydantic, environment, calendar-spine

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from calendar_spine.core.errors import InvalidConfigError
from calendar_spine.core.temporal import resolve_timezone, week_rule_for


class CalendarSettings(BaseSettings):
    """Calendar configuration.

    Fields
    ──────
    locale             : Locale selecting the week rule (first weekday, week 1)
    timezone           : IANA zone for naive timestamps and boundaries
    event_start_field  : Event field holding the start date
    event_end_field    : Event field holding the end date (optional per event)
    log_level          : Structlog log level
    log_json           : JSON logs (None = auto, JSON when not a TTY)
    """

    model_config = SettingsConfigDict(
        env_prefix="CALENDAR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Calendar ─────────────────────────────────────────────────
    locale: str = "en"
    timezone: str = "UTC"

    # ── Events ───────────────────────────────────────────────────
    event_start_field: str = Field(default="start", min_length=1)
    event_end_field: str = Field(default="end", min_length=1)

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool | None = None

    @field_validator("locale")
    @classmethod
    def _known_locale(cls, value: str) -> str:
        try:
            week_rule_for(value)
        except InvalidConfigError as exc:
            raise ValueError(exc.message) from exc
        return value

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            resolve_timezone(value)
        except InvalidConfigError as exc:
            raise ValueError(exc.message) from exc
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value!r}")
        return level


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, CalendarSettings] = {}


def get_settings(*, _force_reload: bool = False) -> CalendarSettings:
    """Load, validate, and cache a :class:`CalendarSettings` instance."""
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]

    settings = CalendarSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()


__all__ = ["CalendarSettings", "get_settings", "clear_settings_cache"]
