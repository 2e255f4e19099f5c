"""calendar_spine.core -- temporal primitives behind the public Calendar.

Architecture::

    Layer 1 -- Errors & Observability
        errors.py          Structured error hierarchy (CalendarError, MissingStartDateError)
        logging.py         structlog configuration and helpers
        settings.py        CalendarSettings (pydantic-settings)

    Layer 2 -- Temporal Primitives
        temporal.py        Granularity, WeekRule, Interval, DateProvider
        accessors.py       ByField / ByFunction event accessors
        context.py         CalendarField, CalendarContext

    Layer 3 -- Engine
        store.py           EventStore (sorted on observation)
        ranges.py          RangeEngine (overlap, narrowing, decomposition)
"""

from calendar_spine.core.accessors import Accessor, ByField, ByFunction, as_accessor, resolve
from calendar_spine.core.context import CalendarContext, CalendarField
from calendar_spine.core.errors import (
    CalendarError,
    ConfigError,
    ErrorCategory,
    ErrorContext,
    InvalidConfigError,
    MissingStartDateError,
    ValidationError,
    categorize_error,
)
from calendar_spine.core.ranges import RangeEngine
from calendar_spine.core.store import EventStore
from calendar_spine.core.temporal import (
    ISO_WEEK,
    US_WEEK,
    WEEK_RULES,
    DateProvider,
    Granularity,
    Interval,
    WeekRule,
    week_rule_for,
)

__all__ = [
    # accessors
    "Accessor",
    "ByField",
    "ByFunction",
    "as_accessor",
    "resolve",
    # context
    "CalendarContext",
    "CalendarField",
    # errors
    "CalendarError",
    "ConfigError",
    "ErrorCategory",
    "ErrorContext",
    "InvalidConfigError",
    "MissingStartDateError",
    "ValidationError",
    "categorize_error",
    # engine
    "EventStore",
    "RangeEngine",
    # temporal
    "DateProvider",
    "Granularity",
    "Interval",
    "WeekRule",
    "ISO_WEEK",
    "US_WEEK",
    "WEEK_RULES",
    "week_rule_for",
]
