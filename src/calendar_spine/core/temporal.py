"""
Temporal primitives: instants, intervals, granularities and week rules.

DateProvider is the date-arithmetic layer every calendar delegates to. It turns
loose inputs (ISO strings, epoch milliseconds, dates, structured fields) into
timezone-aware datetimes and answers the calendar questions the range engine
asks: where does this week start, when does this month end, which week of the
year is this?

Manifesto:
    Calendar math has sharp edges: month lengths, week numbering that changes
    with the locale, boundaries that are inclusive on one side and exclusive on
    the other. Each of those decisions lives here, once:

    - **Aware datetimes only:** Every instant carries the provider's timezone
    - **Explicit locale:** Week rules travel with the provider instance, never
      through process-wide state
    - **Inclusive ends:** ``end_of`` is the last microsecond of the unit, so an
      Interval is closed on both sides
    - **No drift:** Stepping adds ``n`` units to the first cursor instead of
      chaining additions (Jan 31 + 1 month never turns into Mar 28)

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                        DateProvider                          │
        │            (locale → WeekRule, timezone → tzinfo)            │
        ├──────────────────────────────────────────────────────────────┤
        │ instant("2016-06-01T00:00:00Z")     → datetime (aware)       │
        │ instant(1467331200000)              → epoch milliseconds     │
        │ instant({"year": 2016, "month": 5}) → 2016-06-01 00:00       │
        │ start_of(dt, Granularity.WEEK)      → locale week start      │
        │ end_of(dt, Granularity.MONTH)       → last microsecond       │
        │ week_of_year(dt)                    → locale week number     │
        └──────────────────────────────────────────────────────────────┘

        Interval(start, end).by(Granularity.MONTH)
        ──┬──────┬──────┬──────┬──
          │ Jan  │ Feb  │ Mar  │   lazy, finite, inclusive of end
          └──────┴──────┴──────┘

Examples:
    >>> provider = DateProvider(locale="en", timezone="UTC")
    >>> dt = provider.instant("2014-01-01T12:30:00Z")
    >>> provider.start_of(dt, Granularity.WEEK).date()
    datetime.date(2013, 12, 29)
    >>> provider.week_of_year(dt)
    1
    >>> [d.month for d in Interval(provider.instant("2016-01-01"),
    ...                            provider.instant("2016-03-01")).by("month")]
    [1, 2, 3]

Tags:
    temporal, datetime, dateutil, week-numbering, intervals, calendar-spine

Doc-Types:
    - API Reference
    - Temporal Patterns Guide
"""

from __future__ import annotations

import calendar
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone, tzinfo
from enum import Enum
from typing import Any, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from calendar_spine.core.errors import InvalidConfigError

InstantInput = Union[str, int, float, date, datetime, Mapping[str, Any]]

_ONE_MICROSECOND = timedelta(microseconds=1)


class Granularity(str, Enum):
    """
    Calendar units used for narrowing and decomposition.

    Examples:
        >>> Granularity.parse("months")
        <Granularity.MONTH: 'month'>
        >>> Granularity.WEEK.delta(2)
        relativedelta(days=+14)
    """

    YEAR = "year"
    MONTH = "month"
    WEEK = "week"
    DAY = "day"
    HOUR = "hour"
    MINUTE = "minute"
    SECOND = "second"

    @classmethod
    def parse(cls, value: str | Granularity) -> Granularity:
        """Accept a Granularity or its (optionally plural) name."""
        if isinstance(value, Granularity):
            return value
        name = str(value).strip().lower()
        if name.endswith("s"):
            name = name[:-1]
        try:
            return cls(name)
        except ValueError as exc:
            raise InvalidConfigError("granularity", value) from exc

    def delta(self, n: int = 1) -> relativedelta:
        """The calendar offset of ``n`` units."""
        return relativedelta(**{f"{self.value}s": n})

    @property
    def is_exact(self) -> bool:
        """Hours, minutes and seconds have a fixed length; days and up do not."""
        return self in (Granularity.HOUR, Granularity.MINUTE, Granularity.SECOND)

    def shift(self, instant: datetime, n: int = 1) -> datetime:
        """
        ``instant`` moved by ``n`` units.

        Exact units move in absolute time, so stepping across a DST change
        never repeats or skips an hour. Calendar units move on the wall clock.
        """
        if self.is_exact:
            return _absolute_shift(instant, timedelta(**{f"{self.value}s": n}))
        return instant + self.delta(n)


def _utc(instant: datetime) -> datetime:
    return instant.astimezone(timezone.utc)


def _absolute_shift(instant: datetime, offset: timedelta) -> datetime:
    return (_utc(instant) + offset).astimezone(instant.tzinfo)


@dataclass(frozen=True, slots=True)
class WeekRule:
    """
    Locale week convention.

    ``first_weekday`` uses the ``calendar`` module constants (Monday == 0).
    ``min_days`` is how many days of the new year week one must contain:
    1 means "the week holding January 1st", 4 is the ISO-8601 rule.
    """

    first_weekday: int = calendar.SUNDAY
    min_days: int = 1

    def offset(self, d: date) -> int:
        """Days between the first day of d's week and d."""
        return (d.weekday() - self.first_weekday) % 7

    def week_one_start(self, year: int) -> date:
        jan1 = date(year, 1, 1)
        offset = self.offset(jan1)
        start = jan1 - timedelta(days=offset)
        if 7 - offset < self.min_days:
            start += timedelta(weeks=1)
        return start

    def week_year(self, d: date) -> int:
        """The year that owns d's week (may differ from d.year near New Year)."""
        if d < self.week_one_start(d.year):
            return d.year - 1
        if d >= self.week_one_start(d.year + 1):
            return d.year + 1
        return d.year

    def week_of_year(self, d: date) -> int:
        start = self.week_one_start(self.week_year(d))
        return (d - start).days // 7 + 1


US_WEEK = WeekRule(calendar.SUNDAY, 1)
ISO_WEEK = WeekRule(calendar.MONDAY, 4)

WEEK_RULES: dict[str, WeekRule] = {
    "en": US_WEEK,
    "en-us": US_WEEK,
    "en-ca": US_WEEK,
    "ja": US_WEEK,
    "pt-br": US_WEEK,
    "he": US_WEEK,
    "iso": ISO_WEEK,
    "en-gb": ISO_WEEK,
    "en-ie": ISO_WEEK,
    "de": ISO_WEEK,
    "fr": ISO_WEEK,
    "es": ISO_WEEK,
    "it": ISO_WEEK,
    "nl": ISO_WEEK,
    "pt": ISO_WEEK,
    "ru": ISO_WEEK,
    "pl": ISO_WEEK,
    "sv": ISO_WEEK,
    "da": ISO_WEEK,
    "fi": ISO_WEEK,
    "nb": ISO_WEEK,
    "zh-cn": ISO_WEEK,
}


def week_rule_for(locale: str) -> WeekRule:
    """Look up the week rule of a locale, falling back to its language."""
    key = str(locale).strip().lower().replace("_", "-")
    if key in WEEK_RULES:
        return WEEK_RULES[key]
    language = key.split("-", 1)[0]
    if language in WEEK_RULES:
        return WEEK_RULES[language]
    raise InvalidConfigError("locale", locale, f"Unknown locale: {locale!r}")


def resolve_timezone(name: str) -> tzinfo:
    """Resolve an IANA timezone name."""
    if name.upper() in ("UTC", "Z"):
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidConfigError("timezone", name, f"Unknown timezone: {name!r}") from exc


@dataclass(frozen=True, slots=True)
class Interval:
    """
    Closed interval of aware datetimes.

    ``start <= end`` is expected but not enforced; an inverted interval
    contains nothing and ``by()`` yields nothing. Comparisons run in UTC:
    two datetimes sharing a zone compare by wall clock, which is wrong
    inside a repeated DST hour.
    """

    start: datetime
    end: datetime

    def contains(self, instant: datetime) -> bool:
        """Inclusive on both ends."""
        return _utc(self.start) <= _utc(instant) <= _utc(self.end)

    def overlaps(self, other: Interval) -> bool:
        """True when the intervals share any instant, touching ends included."""
        return _utc(self.start) <= _utc(other.end) and _utc(other.start) <= _utc(self.end)

    def by(self, granularity: str | Granularity) -> Iterator[datetime]:
        """Lazily step from start to end (inclusive) one unit at a time."""
        unit = Granularity.parse(granularity)
        end = _utc(self.end)
        n = 0
        current = self.start
        while _utc(current) <= end:
            yield current
            n += 1
            current = unit.shift(self.start, n)

    @property
    def duration(self) -> timedelta:
        return _utc(self.end) - _utc(self.start)

    def __contains__(self, instant: datetime) -> bool:
        return self.contains(instant)

    def __str__(self) -> str:
        return f"{self.start.isoformat()}/{self.end.isoformat()}"


class DateProvider:
    """
    Date arithmetic bound to one locale and one timezone.

    Args:
        locale: Locale name selecting the week rule (``"en"``, ``"de"``, ...)
        timezone: IANA timezone name; naive inputs are read in this zone and
            aware inputs are converted to it
    """

    def __init__(self, locale: str = "en", timezone: str = "UTC"):
        self.locale = locale
        self.timezone = timezone
        self.week_rule = week_rule_for(locale)
        self.tz = resolve_timezone(timezone)

    # ── Construction ─────────────────────────────────────────────────────

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def instant(self, value: InstantInput) -> datetime:
        """
        Build an aware datetime from any supported input.

        Strings go through ``dateutil.parser.parse`` and numbers are epoch
        milliseconds. Parser errors propagate unchanged.
        """
        if isinstance(value, datetime):
            return self._localize(value)
        if isinstance(value, date):
            return datetime(value.year, value.month, value.day, tzinfo=self.tz)
        if isinstance(value, bool):
            raise TypeError("Cannot build an instant from a bool")
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value / 1000, tz=self.tz)
        if isinstance(value, str):
            return self._localize(date_parser.parse(value))
        if isinstance(value, Mapping):
            return self.from_fields(**value)
        raise TypeError(f"Cannot build an instant from {type(value).__name__}")

    def from_fields(
        self,
        year: int | None = None,
        month: int = 0,
        date: int | None = None,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        microsecond: int = 0,
        *,
        day: int | None = None,
    ) -> datetime:
        """
        Build an instant from structured fields.

        ``month`` is zero-based and ``day`` is an alias of ``date`` (day of
        month). A missing year means the current one.
        """
        if year is None:
            year = self.now().year
        if date is None:
            date = 1 if day is None else day
        return datetime(year, month + 1, date, hour, minute, second, microsecond, tzinfo=self.tz)

    def interval(self, start: InstantInput, end: InstantInput) -> Interval:
        return Interval(self.instant(start), self.instant(end))

    def week_start(self, year: int, week: int) -> datetime:
        """Midnight on the first day of ``week`` (1-based) of ``year``."""
        first = self.week_rule.week_one_start(year) + timedelta(weeks=week - 1)
        return datetime(first.year, first.month, first.day, tzinfo=self.tz)

    def _localize(self, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=self.tz)
        return value.astimezone(self.tz)

    # ── Unit boundaries ──────────────────────────────────────────────────

    def start_of(self, instant: datetime, granularity: str | Granularity) -> datetime:
        unit = Granularity.parse(granularity)
        if unit is Granularity.YEAR:
            return instant.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
        if unit is Granularity.MONTH:
            return instant.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        if unit is Granularity.WEEK:
            day = self.start_of(instant, Granularity.DAY)
            return day - timedelta(days=self.week_rule.offset(day.date()))
        if unit is Granularity.DAY:
            return instant.replace(hour=0, minute=0, second=0, microsecond=0)
        if unit is Granularity.HOUR:
            return instant.replace(minute=0, second=0, microsecond=0)
        if unit is Granularity.MINUTE:
            return instant.replace(second=0, microsecond=0)
        return instant.replace(microsecond=0)

    def end_of(self, instant: datetime, granularity: str | Granularity) -> datetime:
        """The last microsecond of the unit containing ``instant``."""
        unit = Granularity.parse(granularity)
        return _absolute_shift(unit.shift(self.start_of(instant, unit)), -_ONE_MICROSECOND)

    def step(self, instant: datetime, granularity: str | Granularity, n: int = 1) -> datetime:
        return Granularity.parse(granularity).shift(instant, n)

    # ── Components ───────────────────────────────────────────────────────

    def weekday(self, instant: datetime) -> int:
        """Zero-based position of the day inside its locale week."""
        return self.week_rule.offset(instant.date())

    def week_of_year(self, instant: datetime) -> int:
        return self.week_rule.week_of_year(instant.date())

    def week_year(self, instant: datetime) -> int:
        return self.week_rule.week_year(instant.date())

    def components(self, instant: datetime) -> dict[str, int]:
        """Calendar components of an instant (month is zero-based)."""
        return {
            "year": instant.year,
            "month": instant.month - 1,
            "week": self.week_of_year(instant),
            "week_year": self.week_year(instant),
            "date": instant.day,
            "weekday": self.weekday(instant),
            "hour": instant.hour,
            "minute": instant.minute,
            "second": instant.second,
        }

    def __repr__(self) -> str:
        return f"DateProvider(locale={self.locale!r}, timezone={self.timezone!r})"


__all__ = [
    "Granularity",
    "WeekRule",
    "US_WEEK",
    "ISO_WEEK",
    "WEEK_RULES",
    "week_rule_for",
    "resolve_timezone",
    "Interval",
    "DateProvider",
    "InstantInput",
]
