"""
Root Typer application for the calendar-spine CLI.

Commands read events from a JSON file, build a Calendar configured from
``CalendarSettings`` (overridable per command) and print tables or JSON.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError

from calendar_spine.calendar import Calendar
from calendar_spine.cli.utils import build_calendar, fail, output_rows, summarize
from calendar_spine.core.errors import CalendarError
from calendar_spine.core.logging import LogContext, configure_logging
from calendar_spine.core.settings import get_settings
from calendar_spine.core.temporal import Granularity

app = typer.Typer(
    name="calendar-spine",
    help="calendar-spine: range queries and calendar breakdowns over event files.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

_DECOMPOSABLE = ("year", "month", "week", "day")

# ── Shared options ───────────────────────────────────────────────────────

EventsArg = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="JSON file of events")
LocaleOpt = typer.Option(None, "--locale", help="Locale of the week rule (default: CALENDAR_LOCALE)")
TimezoneOpt = typer.Option(None, "--timezone", "--tz", help="IANA timezone (default: CALENDAR_TIMEZONE)")
StartFieldOpt = typer.Option(None, "--start-field", help="Event field holding the start date")
EndFieldOpt = typer.Option(None, "--end-field", help="Event field holding the end date")
JsonOpt = typer.Option(False, "--json", help="Print JSON instead of a table")


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from calendar_spine import __version__

        typer.echo(f"calendar-spine {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """calendar-spine CLI: find events in a range, split them by period."""
    try:
        settings = get_settings()
    except ValidationError as exc:
        problems = "; ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in exc.errors())
        fail(f"Invalid settings ({problems})")
    configure_logging(level=settings.log_level, json_format=settings.log_json)


def _run(command: str, action: Callable[[], Any]) -> Any:
    """Run a command body, turning expected failures into a clean exit."""
    with LogContext(command=command):
        try:
            return action()
        except (CalendarError, ValueError, TypeError, OSError) as exc:
            fail(str(exc))


# ── Commands ─────────────────────────────────────────────────────────────


@app.command("find")
def find(
    events_file: Path = EventsArg,
    start: str = typer.Option(..., "--start", "-s", help="Range start (inclusive)"),
    end: str = typer.Option(..., "--end", "-e", help="Range end (inclusive)"),
    locale: str | None = LocaleOpt,
    timezone: str | None = TimezoneOpt,
    start_field: str | None = StartFieldOpt,
    end_field: str | None = EndFieldOpt,
    json_out: bool = JsonOpt,
) -> None:
    """List the events overlapping [START, END]."""

    def action() -> list[Any]:
        calendar = build_calendar(
            events_file, locale=locale, timezone=timezone, start_field=start_field, end_field=end_field
        )
        return calendar.find_in_range(start, end).to_list()

    events = _run("find", action)
    output_rows(events, as_json=json_out, title=f"Events {start} → {end}")


@app.command("split")
def split(
    events_file: Path = EventsArg,
    by: str = typer.Option("month", "--by", "-b", help="Period: year, month, week or day"),
    start: str = typer.Option(..., "--start", "-s", help="First period contains this instant"),
    end: str = typer.Option(..., "--end", "-e", help="Last period contains this instant"),
    locale: str | None = LocaleOpt,
    timezone: str | None = TimezoneOpt,
    start_field: str | None = StartFieldOpt,
    end_field: str | None = EndFieldOpt,
    json_out: bool = JsonOpt,
) -> None:
    """Count events per period between START and END."""

    def action() -> list[Calendar]:
        unit = Granularity.parse(by)
        if unit.value not in _DECOMPOSABLE:
            raise ValueError(f"--by must be one of {', '.join(_DECOMPOSABLE)}, got {by!r}")
        calendar = build_calendar(
            events_file, locale=locale, timezone=timezone, start_field=start_field, end_field=end_field
        )
        calendar.set_start(start).set_end(end)
        return calendar.periods(unit)

    periods = _run("split", action)
    output_rows([summarize(period) for period in periods], as_json=json_out, title=f"Events by {by}")


@app.command("month-weeks")
def month_weeks(
    events_file: Path = EventsArg,
    year: int = typer.Option(..., "--year", "-y", help="Calendar year"),
    month: int = typer.Option(..., "--month", "-m", min=0, max=11, help="Month, zero-based (0 = January)"),
    locale: str | None = LocaleOpt,
    timezone: str | None = TimezoneOpt,
    start_field: str | None = StartFieldOpt,
    end_field: str | None = EndFieldOpt,
    json_out: bool = JsonOpt,
) -> None:
    """Count events per week of a month (whole weeks, so edges may spill over)."""

    def action() -> list[Calendar]:
        calendar = build_calendar(
            events_file, locale=locale, timezone=timezone, start_field=start_field, end_field=end_field
        )
        # the year only anchors the month; weeks may reach into the neighbouring years
        return calendar.set_start(calendar.provider.from_fields(year=year)).month_weeks(month)

    weeks = _run("month-weeks", action)
    output_rows([summarize(week) for week in weeks], as_json=json_out, title=f"Weeks of {year}-{month + 1:02d}")
