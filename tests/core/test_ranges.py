"""
Tests for calendar_spine.core.ranges module.

Tests cover:
- The inclusive overlap predicate
- Narrowing a context to one calendar unit
- Month bounds widened to whole weeks
- Period generation and decomposition logging
"""

from datetime import datetime, timezone

import pytest
from structlog.testing import capture_logs

from calendar_spine.core.context import CalendarContext, CalendarField
from calendar_spine.core.ranges import RangeEngine
from calendar_spine.core.temporal import DateProvider, Interval

UTC = timezone.utc


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=UTC)


@pytest.fixture
def engine(provider) -> RangeEngine:
    """Events are (start, end) tuples of datetimes."""
    return RangeEngine(provider, lambda e: e[0], lambda e: e[1])


@pytest.fixture
def january() -> Interval:
    return Interval(utc(2014, 1, 1), utc(2014, 1, 31, 23, 59, 59))


class TestMatches:
    """Tests for the overlap predicate."""

    def test_start_inside(self, engine, january):
        assert engine.matches((utc(2014, 1, 31), utc(2014, 3, 1)), january)

    def test_end_inside(self, engine, january):
        assert engine.matches((utc(2013, 11, 1), utc(2014, 1, 1)), january)

    def test_event_spans_query(self, engine, january):
        assert engine.matches((utc(2013, 1, 1), utc(2015, 1, 1)), january)

    def test_touching_boundary_counts(self, engine, january):
        assert engine.matches((utc(2013, 12, 1), january.start), january)

    def test_disjoint(self, engine, january):
        assert not engine.matches((utc(2014, 2, 1), utc(2014, 2, 2)), january)


class TestFilter:
    """Tests for RangeEngine.filter."""

    def test_keeps_incoming_order(self, engine, january):
        events = [
            (utc(2014, 1, 20), utc(2014, 1, 20)),
            (utc(2014, 2, 20), utc(2014, 2, 20)),
            (utc(2014, 1, 5), utc(2014, 1, 5)),
        ]
        assert engine.filter(events, january) == [events[0], events[2]]

    def test_logs_counts(self, engine, january):
        events = [(utc(2014, 1, 20), utc(2014, 1, 20)), (utc(2015, 1, 1), utc(2015, 1, 1))]
        with capture_logs() as logs:
            engine.filter(events, january)

        entry = next(log for log in logs if log["event"] == "calendar_filtered")
        assert entry["log_level"] == "debug"
        assert entry["matched"] == 1
        assert entry["total"] == 2


class TestNarrow:
    """Tests for RangeEngine.narrow."""

    def test_year(self, engine):
        q = engine.narrow(CalendarContext(), CalendarField.YEAR, 2010)
        assert q == Interval(utc(2010, 1, 1), utc(2010, 12, 31, 23, 59, 59, 999999))

    def test_month_uses_context_year(self, engine):
        q = engine.narrow(CalendarContext(year=2016), CalendarField.MONTH, 5)
        assert q.start == utc(2016, 6, 1)
        assert q.end == utc(2016, 6, 30, 23, 59, 59, 999999)

    def test_month_defaults_to_current_year(self, engine, provider):
        q = engine.narrow(CalendarContext(), CalendarField.MONTH, 0)
        assert q.start == utc(provider.now().year, 1, 1)

    def test_date_uses_context_month(self, engine):
        q = engine.narrow(CalendarContext(year=2016, month=5), CalendarField.DATE, 10)
        assert q == Interval(utc(2016, 6, 10), utc(2016, 6, 10, 23, 59, 59, 999999))

    def test_hour(self, engine):
        ctx = CalendarContext(year=2016, month=5, date=10)
        assert engine.narrow(ctx, CalendarField.HOUR, 8).start == utc(2016, 6, 10, 8)

    def test_minute(self, engine):
        ctx = CalendarContext(year=2016, month=5, date=10, hour=8)
        q = engine.narrow(ctx, CalendarField.MINUTE, 30)
        assert q == Interval(utc(2016, 6, 10, 8, 30), utc(2016, 6, 10, 8, 30, 59, 999999))

    def test_second(self, engine):
        ctx = CalendarContext(year=2016, month=5, date=10, hour=8, minute=30)
        q = engine.narrow(ctx, CalendarField.SECOND, 15)
        assert q == Interval(utc(2016, 6, 10, 8, 30, 15), utc(2016, 6, 10, 8, 30, 15, 999999))

    def test_week(self, engine):
        q = engine.narrow(CalendarContext(year=2014), CalendarField.WEEK, 2)
        assert q == Interval(utc(2014, 1, 5), utc(2014, 1, 11, 23, 59, 59, 999999))

    def test_weekday_crosses_new_year(self, engine):
        ctx = CalendarContext(year=2014, week=1, week_year=2014)
        q = engine.narrow(ctx, CalendarField.WEEKDAY, 1)
        assert q.start == utc(2013, 12, 30)

    def test_string_field(self, engine):
        q = engine.narrow(CalendarContext(year=2016), "month", 1)
        assert q.end.day == 29

    def test_iso_week(self):
        iso = RangeEngine(DateProvider(locale="de"), lambda e: e, lambda e: e)
        q = iso.narrow(CalendarContext(year=2016), CalendarField.WEEK, 1)
        assert q.start == utc(2016, 1, 4)


class TestMonthBounds:
    """Tests for RangeEngine.month_bounds."""

    def test_january_2014(self, engine):
        bounds = engine.month_bounds(CalendarContext(year=2014), 0)
        assert bounds.start == utc(2013, 12, 29)
        assert bounds.end == utc(2014, 2, 1, 23, 59, 59, 999999)

    def test_iso_january_2014(self):
        iso = RangeEngine(DateProvider(locale="de"), lambda e: e, lambda e: e)
        bounds = iso.month_bounds(CalendarContext(year=2014), 0)
        assert bounds.start == utc(2013, 12, 30)
        assert bounds.end == utc(2014, 2, 2, 23, 59, 59, 999999)


class TestDecompose:
    """Tests for period generation and decomposition."""

    def test_periods_are_contiguous(self, engine, january):
        periods = list(engine.periods(january, "week"))
        assert len(periods) == 5
        assert periods[0].start == utc(2013, 12, 29)
        for previous, current in zip(periods, periods[1:]):
            assert (current.start - previous.end).total_seconds() == pytest.approx(1e-6)

    def test_decompose_builds_one_result_per_period(self, engine, january):
        with capture_logs() as logs:
            starts = engine.decompose(january, "day", lambda period: period.start)

        assert len(starts) == 31
        entry = next(log for log in logs if log["event"] == "calendar_decomposed")
        assert entry["granularity"] == "day"
        assert entry["periods"] == 31

    def test_unbounded_warns_and_returns_empty(self, engine):
        with capture_logs() as logs:
            assert engine.decompose(None, "year", lambda period: period, operation="years") == []

        entry = next(log for log in logs if log["event"] == "calendar_unbounded")
        assert entry["log_level"] == "warning"
        assert entry["operation"] == "years"
