"""
Calendar: the public, queryable and decomposable event container.

A Calendar holds events, optionally covers an interval, and answers two kinds
of questions:

- **Which events occur in period X?** ``find_in_range``, ``find_in_year``,
  ``find_in_month``, ... each return a new child Calendar bound to the period
  and holding a filtered copy of the events.
- **What does my calendar look like period by period?** ``years()``,
  ``months()``, ``weeks()``, ``days()`` and ``month_weeks()`` return one child
  Calendar per calendar unit, empty periods included.

Manifesto:
    - **Queries never mutate:** every result is an independent Calendar
    - **Contextual narrowing:** ``find_in_year(2016).find_in_month(5)`` is June
      2016 because the child's start (2016-01-01) provides the year
    - **Sorted view:** iteration, indexing and the list-style helpers
      (``remove_first``, ``extract_range``, ...) all see events by start date
    - **Explicit configuration:** accessors, locale and timezone are per
      calendar; children inherit them

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                          Calendar                             │
        ├──────────────────────────────────────────────────────────────┤
        │ CalendarOptions   event_start / event_end accessors,         │
        │                   locale, timezone                           │
        │ DateProvider      built from the options                     │
        │ Interval | None   [start, end] once both are set             │
        │ CalendarContext   components of start (narrowing defaults)   │
        │ EventStore        the events, sorted on observation          │
        │ RangeEngine       overlap filter, narrowing, decomposition   │
        └──────────────────────────────────────────────────────────────┘

Examples:
    >>> cal = Calendar()
    >>> cal.append({"start": "2016-06-01T00:00:00Z", "end": "2016-06-02T00:00:00Z", "id": 11})
    >>> june = cal.find_in_year(2016).find_in_month(5)
    >>> [event["id"] for event in june]
    [11]

    >>> cal = Calendar("2014-01-01T00:00:00Z", "2014-01-31T23:59:59Z")
    >>> len(cal.weeks())
    5

Tags:
    calendar, events, range-queries, decomposition, public-api, calendar-spine

Doc-Types:
    - API Reference
    - Getting Started
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from calendar_spine.core.accessors import Accessor, ByField, as_accessor, is_missing, resolve
from calendar_spine.core.context import CalendarContext, CalendarField
from calendar_spine.core.errors import MissingStartDateError
from calendar_spine.core.logging import get_logger
from calendar_spine.core.ranges import RangeEngine
from calendar_spine.core.settings import CalendarSettings, get_settings
from calendar_spine.core.store import EventStore
from calendar_spine.core.temporal import DateProvider, Granularity, InstantInput, Interval

logger = get_logger(__name__)

AccessorSpec = str | Callable[[Any], Any] | Accessor


@dataclass(frozen=True, slots=True)
class CalendarOptions:
    """Per-calendar configuration, inherited by every derived calendar."""

    event_start: Accessor = field(default_factory=lambda: ByField("start"))
    event_end: Accessor = field(default_factory=lambda: ByField("end"))
    locale: str = "en"
    timezone: str = "UTC"


class Calendar:
    """
    Event container bound to an optional interval.

    Args:
        start: Start of the covered interval (anything DateProvider.instant takes)
        end: End of the covered interval
        event_start: Field name or callable resolving an event's start
        event_end: Field name or callable resolving an event's end; events
            without an end use their start
        locale: Locale of the week rule
        timezone: IANA timezone of naive inputs and unit boundaries
        events: Initial events
    """

    def __init__(
        self,
        start: InstantInput | None = None,
        end: InstantInput | None = None,
        *,
        event_start: AccessorSpec = "start",
        event_end: AccessorSpec = "end",
        locale: str = "en",
        timezone: str = "UTC",
        events: Iterable[Any] | None = None,
    ):
        self._options = CalendarOptions()
        self._start: datetime | None = None
        self._end: datetime | None = None
        self._interval: Interval | None = None
        self._context = CalendarContext()
        self._store = EventStore(self.event_start_of, events)

        self.configure(event_start=event_start, event_end=event_end, locale=locale, timezone=timezone)

        if start is not None:
            self.set_start(start)
        if end is not None:
            self.set_end(end)

    @classmethod
    def from_settings(
        cls,
        settings: CalendarSettings | None = None,
        **kwargs: Any,
    ) -> Calendar:
        """Build a calendar configured from :class:`CalendarSettings`."""
        settings = settings or get_settings()
        kwargs.setdefault("event_start", settings.event_start_field)
        kwargs.setdefault("event_end", settings.event_end_field)
        kwargs.setdefault("locale", settings.locale)
        kwargs.setdefault("timezone", settings.timezone)
        return cls(**kwargs)

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    def configure(
        self,
        *,
        event_start: AccessorSpec | None = None,
        event_end: AccessorSpec | None = None,
        locale: str | None = None,
        timezone: str | None = None,
    ) -> Calendar:
        """(Re-)configure accessors, locale and timezone; unset values are kept."""
        current = self._options
        options = CalendarOptions(
            event_start=as_accessor(event_start, key="event_start") if event_start is not None else current.event_start,
            event_end=as_accessor(event_end, key="event_end") if event_end is not None else current.event_end,
            locale=locale or current.locale,
            timezone=timezone or current.timezone,
        )
        provider = DateProvider(locale=options.locale, timezone=options.timezone)

        self._options = options
        self._provider = provider
        self._engine = RangeEngine(provider, self.event_start_of, self.event_end_of)
        self._store.rekey(self.event_start_of)

        # bounds follow the new timezone and week rule
        if self._start is not None:
            self.set_start(self._start)
        if self._end is not None:
            self.set_end(self._end)

        logger.debug("calendar_configured", locale=options.locale, timezone=options.timezone)
        return self

    @property
    def options(self) -> CalendarOptions:
        return self._options

    @property
    def provider(self) -> DateProvider:
        return self._provider

    # =========================================================================
    # BOUNDS
    # =========================================================================

    def set_start(self, start: InstantInput) -> Calendar:
        self._start = self._provider.instant(start)
        self._context = CalendarContext.from_instant(self._start, self._provider)
        self._refresh_interval()
        return self

    def set_end(self, end: InstantInput) -> Calendar:
        self._end = self._provider.instant(end)
        self._refresh_interval()
        return self

    def _refresh_interval(self) -> None:
        if self._start is not None and self._end is not None:
            self._interval = Interval(self._start, self._end)
        else:
            self._interval = None

    @property
    def start(self) -> datetime | None:
        return self._start

    @property
    def end(self) -> datetime | None:
        return self._end

    @property
    def interval(self) -> Interval | None:
        return self._interval

    @property
    def context(self) -> CalendarContext:
        return self._context

    @property
    def is_bounded(self) -> bool:
        return self._interval is not None

    # =========================================================================
    # EVENT READERS
    # =========================================================================

    def event_start_of(self, event: Any) -> datetime:
        """Start instant of an event; MissingStartDateError when it has none."""
        accessor = self._options.event_start
        value = resolve(accessor, event)
        if is_missing(value):
            raise MissingStartDateError(accessor=accessor.describe(), event=event)
        return self._provider.instant(value)

    def event_end_of(self, event: Any) -> datetime:
        """End instant of an event, falling back to its start."""
        value = resolve(self._options.event_end, event)
        if is_missing(value):
            return self.event_start_of(event)
        return self._provider.instant(value)

    # =========================================================================
    # QUERIES
    # =========================================================================

    def find_in_range(self, start: InstantInput, end: InstantInput) -> Calendar:
        """Events touching ``[start, end]`` (inclusive) as a new calendar."""
        return self._narrowed(self._provider.interval(start, end))

    def find_in_year(self, year: int) -> Calendar:
        return self._find_in(CalendarField.YEAR, year)

    def find_in_month(self, month: int) -> Calendar:
        """Month of this calendar's year; ``month`` is zero-based."""
        return self._find_in(CalendarField.MONTH, month)

    def find_in_week(self, week: int) -> Calendar:
        """Locale week of this calendar's year."""
        return self._find_in(CalendarField.WEEK, week)

    def find_in_date(self, date: int) -> Calendar:
        """Day of the month of this calendar's month."""
        return self._find_in(CalendarField.DATE, date)

    def find_in_day(self, weekday: int) -> Calendar:
        """Day of this calendar's week; 0 is the locale's first weekday."""
        return self._find_in(CalendarField.WEEKDAY, weekday)

    def find_in_hour(self, hour: int) -> Calendar:
        return self._find_in(CalendarField.HOUR, hour)

    def find_in_minute(self, minute: int) -> Calendar:
        return self._find_in(CalendarField.MINUTE, minute)

    def find_in_second(self, second: int) -> Calendar:
        return self._find_in(CalendarField.SECOND, second)

    def _find_in(self, component: CalendarField, value: int) -> Calendar:
        return self._narrowed(self._engine.narrow(self._context, component, value))

    def _narrowed(self, query: Interval) -> Calendar:
        child = self._spawn()
        child.set_start(query.start).set_end(query.end)
        child._store.set_all(self._engine.filter(self._store, query))
        child._store.sort()
        return child

    def _spawn(self) -> Calendar:
        return Calendar(
            event_start=self._options.event_start,
            event_end=self._options.event_end,
            locale=self._options.locale,
            timezone=self._options.timezone,
        )

    # =========================================================================
    # DECOMPOSITION
    # =========================================================================

    def periods(self, granularity: str | Granularity) -> list[Calendar]:
        """One calendar per ``granularity`` unit covering this calendar."""
        return self._decompose(Granularity.parse(granularity), "periods")

    def years(self) -> list[Calendar]:
        return self._decompose(Granularity.YEAR, "years")

    def months(self) -> list[Calendar]:
        return self._decompose(Granularity.MONTH, "months")

    def weeks(self) -> list[Calendar]:
        return self._decompose(Granularity.WEEK, "weeks")

    def days(self) -> list[Calendar]:
        return self._decompose(Granularity.DAY, "days")

    def month_weeks(self, month: int) -> list[Calendar]:
        """
        Weeks of month ``month`` (zero-based) of this calendar's year.

        The first and last weeks may reach into the neighbouring months.
        """
        return self._narrowed(self._engine.month_bounds(self._context, month)).weeks()

    def _decompose(self, unit: Granularity, operation: str) -> list[Calendar]:
        return self._engine.decompose(self._interval, unit, self._narrowed, operation=operation)

    # =========================================================================
    # SORTED VIEW
    # =========================================================================

    def to_list(self) -> list[Any]:
        """Snapshot of the events ordered by start date."""
        return self._store.snapshot_sorted()

    def append(self, event: Any) -> None:
        self._store.add(event)

    def extend(self, events: Iterable[Any]) -> None:
        self._store.extend(events)

    def remove(self, event: Any) -> None:
        self._store.remove(event)

    def remove_first(self) -> Any:
        """Remove and return the earliest event."""
        return self._store.pop_first()

    def remove_last(self) -> Any:
        """Remove and return the latest event."""
        return self._store.pop_last()

    def extract_range(self, start: int | None = None, stop: int | None = None) -> list[Any]:
        """Copy of positions ``start:stop`` of the sorted view."""
        return self._store.slice(start, stop)

    def remove_range(self, start: int | None = None, stop: int | None = None) -> list[Any]:
        """Remove and return positions ``start:stop`` of the sorted view."""
        return self._store.splice(start, stop)

    def map(self, fn: Callable[[Any], Any]) -> list[Any]:
        return [fn(event) for event in self._store]

    def filter(self, predicate: Callable[[Any], bool]) -> list[Any]:
        return [event for event in self._store if predicate(event)]

    def for_each(self, fn: Callable[[Any], Any]) -> None:
        for event in self._store:
            fn(event)

    def any_match(self, predicate: Callable[[Any], bool]) -> bool:
        return any(predicate(event) for event in self._store)

    def all_match(self, predicate: Callable[[Any], bool]) -> bool:
        return all(predicate(event) for event in self._store)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._store)

    def __getitem__(self, index: int | slice) -> Any:
        return self._store[index]

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, event: Any) -> bool:
        return event in self._store

    def __repr__(self) -> str:
        start = self._start.isoformat() if self._start else None
        end = self._end.isoformat() if self._end else None
        return f"Calendar(start={start!r}, end={end!r}, events={len(self._store)})"


__all__ = ["Calendar", "CalendarOptions"]
