"""
Calendar context: the cached components of a calendar's start.

Narrowing is contextual. ``find_in_month(5)`` on a calendar that covers 2016
means June 2016, not June of the current year. The components that make this
work are captured once, when the calendar's start is set, in an immutable
CalendarContext that the range engine receives as an argument.

Examples:
    >>> from calendar_spine.core.temporal import DateProvider
    >>> provider = DateProvider()
    >>> ctx = CalendarContext.from_instant(provider.instant("2016-06-10T08:30:00Z"), provider)
    >>> ctx.year, ctx.month, ctx.date, ctx.hour
    (2016, 5, 10, 8)
    >>> CalendarContext().is_empty
    True

Tags:
    calendar-context, value-object, narrowing, calendar-spine

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from dataclasses import astuple, dataclass
from datetime import datetime
from enum import Enum

from calendar_spine.core.temporal import DateProvider, Granularity


class CalendarField(str, Enum):
    """
    Components a calendar can be narrowed by.

    ``DATE`` is the day of the month; ``WEEKDAY`` is the zero-based day inside
    the locale week.
    """

    YEAR = "year"
    MONTH = "month"
    WEEK = "week"
    DATE = "date"
    WEEKDAY = "weekday"
    HOUR = "hour"
    MINUTE = "minute"
    SECOND = "second"

    @property
    def unit(self) -> Granularity:
        """The granularity of the interval a narrowed calendar covers."""
        if self in (CalendarField.DATE, CalendarField.WEEKDAY):
            return Granularity.DAY
        return Granularity(self.value)


@dataclass(frozen=True, slots=True)
class CalendarContext:
    """
    Components of a calendar's start instant.

    All fields are ``None`` for a calendar without a start. ``month`` is
    zero-based, ``week`` follows the provider's locale week numbering and
    ``week_year`` is the year that week belongs to.
    """

    year: int | None = None
    month: int | None = None
    week: int | None = None
    week_year: int | None = None
    date: int | None = None
    weekday: int | None = None
    hour: int | None = None
    minute: int | None = None
    second: int | None = None

    @classmethod
    def from_instant(cls, instant: datetime, provider: DateProvider) -> CalendarContext:
        return cls(**provider.components(instant))

    @property
    def is_empty(self) -> bool:
        return all(value is None for value in astuple(self))


__all__ = ["CalendarField", "CalendarContext"]
