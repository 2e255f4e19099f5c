"""
Range engine: overlap filtering, narrowing and calendar decomposition.

Every calendar query reduces to one primitive: compute a query Interval, keep
the events whose ``[start, end]`` touches it. Narrowing (``find_in_month``,
``find_in_hour``, ...) only decides *which* interval; decomposition
(``years()``, ``weeks()``, ...) runs the primitive over a sequence of
adjacent intervals.

Manifesto:
    - **One predicate:** start within Q, or end within Q, or [start, end]
      overlaps Q, all inclusive. Touching boundaries count as a match.
    - **Pure narrowing:** the interval for "month 5" is a function of the
      CalendarContext, the field, the value and the provider, nothing else
    - **Coverage over content:** decomposition emits one period per calendar
      unit, empty or not, with no gaps between them

Architecture:
    ::

        narrow(context, MONTH, 5)           decompose(interval, WEEK, build)
              │                                      │
              ▼                                      ▼
        anchor = 2016-06-01              cursor = [start_of(start), start_of(end)]
        Q = [start_of, end_of]           for c in cursor.by(WEEK):
              │                              build(Interval(c, end_of(c)))
              ▼                                      │
        filter(events, Q)  ◄─────────────────────────┘

Examples:
    >>> from calendar_spine.core.context import CalendarContext, CalendarField
    >>> from calendar_spine.core.temporal import DateProvider
    >>> engine = RangeEngine(DateProvider(), lambda e: e, lambda e: e)
    >>> q = engine.narrow(CalendarContext(year=2016), CalendarField.MONTH, 5)
    >>> q.start.date(), q.end.date()
    (datetime.date(2016, 6, 1), datetime.date(2016, 6, 30))

Tags:
    range-engine, overlap, narrowing, decomposition, calendar-spine

Doc-Types:
    - API Reference
    - Temporal Patterns Guide
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from datetime import datetime, timedelta
from typing import Any, TypeVar

from calendar_spine.core.context import CalendarContext, CalendarField
from calendar_spine.core.logging import get_logger
from calendar_spine.core.temporal import DateProvider, Granularity, Interval

logger = get_logger(__name__)

T = TypeVar("T")

# Components read from the context, coarsest first
_FIELD_ORDER = ("year", "month", "date", "hour", "minute", "second")


class RangeEngine:
    """
    Range algorithms for one provider and one pair of event readers.

    Args:
        provider: Date arithmetic (locale week rules, timezone)
        start_of: Resolves an event to its start instant
        end_of: Resolves an event to its end instant
    """

    def __init__(
        self,
        provider: DateProvider,
        start_of: Callable[[Any], datetime],
        end_of: Callable[[Any], datetime],
    ):
        self.provider = provider
        self.start_of = start_of
        self.end_of = end_of

    # ── Overlap ──────────────────────────────────────────────────────────

    def matches(self, event: Any, query: Interval) -> bool:
        start = self.start_of(event)
        end = self.end_of(event)
        return query.contains(start) or query.contains(end) or Interval(start, end).overlaps(query)

    def filter(self, events: Iterable[Any], query: Interval) -> list[Any]:
        """Events matching ``query``, in their incoming order."""
        events = list(events)
        matched = [event for event in events if self.matches(event, query)]
        logger.debug(
            "calendar_filtered",
            interval=str(query),
            matched=len(matched),
            total=len(events),
        )
        return matched

    # ── Narrowing ────────────────────────────────────────────────────────

    def narrow(self, context: CalendarContext, field: str | CalendarField, value: int) -> Interval:
        """
        The interval of one calendar unit.

        Components coarser than ``field`` come from ``context``; missing ones
        default to the current year, January, the 1st, midnight and week 1.
        """
        field = CalendarField(field)
        anchor = self._anchor(context, field, value)
        unit = field.unit
        return Interval(self.provider.start_of(anchor, unit), self.provider.end_of(anchor, unit))

    def _anchor(self, context: CalendarContext, field: CalendarField, value: int) -> datetime:
        if field is CalendarField.WEEK:
            return self.provider.week_start(self._year(context.year), value)
        if field is CalendarField.WEEKDAY:
            week = context.week if context.week is not None else 1
            first = self.provider.week_start(self._year(context.week_year), week)
            return first + timedelta(days=value)

        fields: dict[str, int] = {}
        for name in _FIELD_ORDER:
            if name == field.value:
                fields[name] = value
                break
            current = getattr(context, name)
            if current is not None:
                fields[name] = current
        return self.provider.from_fields(**fields)

    def _year(self, year: int | None) -> int:
        return year if year is not None else self.provider.now().year

    def month_bounds(self, context: CalendarContext, month: int) -> Interval:
        """Month ``month`` of the context year, widened to whole weeks."""
        anchor = self.provider.from_fields(year=context.year, month=month)
        first = self.provider.start_of(anchor, Granularity.MONTH)
        last = self.provider.end_of(anchor, Granularity.MONTH)
        return Interval(
            self.provider.start_of(first, Granularity.WEEK),
            self.provider.end_of(last, Granularity.WEEK),
        )

    # ── Decomposition ────────────────────────────────────────────────────

    def periods(self, interval: Interval, granularity: str | Granularity) -> Iterator[Interval]:
        """Adjacent whole units covering ``interval``, lazily."""
        unit = Granularity.parse(granularity)
        cursor = Interval(
            self.provider.start_of(interval.start, unit),
            self.provider.start_of(interval.end, unit),
        )
        for start in cursor.by(unit):
            yield Interval(start, self.provider.end_of(start, unit))

    def decompose(
        self,
        interval: Interval | None,
        granularity: str | Granularity,
        build: Callable[[Interval], T],
        *,
        operation: str | None = None,
    ) -> list[T]:
        """
        Build one result per period of ``interval``.

        An unbounded calendar (``interval is None``) cannot be decomposed: a
        warning is logged and the result is empty.
        """
        unit = Granularity.parse(granularity)
        if interval is None:
            logger.warning(
                "calendar_unbounded",
                operation=operation or f"{unit.value}s",
                hint="assign both start and end before decomposing",
            )
            return []

        results = [build(period) for period in self.periods(interval, unit)]
        logger.debug("calendar_decomposed", granularity=unit.value, periods=len(results))
        return results


__all__ = ["RangeEngine"]
