"""
CLI utility helpers: events loading, calendar construction and output.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from calendar_spine.calendar import Calendar
from calendar_spine.core.settings import get_settings

console = Console()
err_console = Console(stderr=True)


# ── Input helpers ────────────────────────────────────────────────────────


def load_events(path: Path) -> list[Any]:
    """Read events from a JSON array (or an object with an ``events`` array)."""
    payload = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(payload, dict) and "events" in payload:
        payload = payload["events"]
    if not isinstance(payload, list) or not all(isinstance(event, dict) for event in payload):
        raise ValueError(f"{path}: expected a JSON array of event objects")
    return payload


def build_calendar(
    path: Path,
    *,
    locale: str | None = None,
    timezone: str | None = None,
    start_field: str | None = None,
    end_field: str | None = None,
) -> Calendar:
    """A calendar holding the events of ``path``; unset options come from settings."""
    overrides = {
        "locale": locale,
        "timezone": timezone,
        "event_start": start_field,
        "event_end": end_field,
    }
    kwargs = {key: value for key, value in overrides.items() if value is not None}
    return Calendar.from_settings(get_settings(), events=load_events(path), **kwargs)


def fail(message: str) -> NoReturn:
    err_console.print(f"[bold red]Error[/bold red]: {escape(message)}")
    raise typer.Exit(code=1)


# ── Output helpers ───────────────────────────────────────────────────────


def summarize(calendar: Calendar) -> dict[str, Any]:
    """One row describing a period calendar."""
    return {
        "start": calendar.start.isoformat() if calendar.start else None,
        "end": calendar.end.isoformat() if calendar.end else None,
        "events": len(calendar),
    }


def output_rows(rows: list[dict[str, Any]], *, as_json: bool = False, title: str = "") -> None:
    """Render rows as JSON or as a Rich table."""
    if as_json:
        console.print_json(json.dumps(rows, default=str))
        return

    if not rows:
        console.print("[dim]No items.[/dim]")
        return
    _print_table(rows, title=title)


# ── Private helpers ──────────────────────────────────────────────────────


def _print_table(items: list[dict[str, Any]], *, title: str = "") -> None:
    """Render a list of dicts as a Rich table; columns are the union of keys."""
    columns: list[str] = []
    for item in items:
        for key in item:
            if key not in columns:
                columns.append(key)
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in columns:
        table.add_column(col, overflow="fold")
    for item in items:
        table.add_row(*("" if item.get(col) is None else str(item.get(col)) for col in columns))
    console.print(table)
