"""
Shared pytest fixtures and configuration for calendar-spine tests.

This module provides:
- Settings cache and structlog isolation between tests
- A UTC DateProvider
- Event factories mirroring the usual calendar scenarios
- Temporary events files for CLI tests

Usage:
    Fixtures are auto-discovered by pytest. Use them as function arguments:

    def test_something(yearly_events):
        ...
"""

import json
import sys
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
import structlog

# Ensure calendar_spine package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from calendar_spine import Calendar
from calendar_spine.core.logging import clear_context
from calendar_spine.core.settings import clear_settings_cache
from calendar_spine.core.temporal import DateProvider


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)

        # CLI and settings tests cross process-level state
        if "cli" in str(test_path) or "settings" in str(test_path):
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_settings() -> Generator[None, None, None]:
    """Clear the settings cache before and after each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def isolated_logging() -> Generator[None, None, None]:
    """
    Reset structlog before and after each test.

    CLI tests call configure_logging(), which filters DEBUG events; later
    tests capturing debug logs need the defaults back.
    """
    structlog.reset_defaults()
    clear_context()
    yield
    clear_context()
    structlog.reset_defaults()


# =============================================================================
# Temporal Fixtures
# =============================================================================


@pytest.fixture
def provider() -> DateProvider:
    """US week rule, UTC."""
    return DateProvider(locale="en", timezone="UTC")


@pytest.fixture
def yearly_events() -> list[dict[str, Any]]:
    """
    Ten events starting on January 1st of 2000..2009, each lasting five years.

    ids are 1..10 in chronological order.
    """
    return [
        {
            "start": f"{2000 + i}-01-01T00:00:00Z",
            "end": f"{2005 + i}-01-01T00:00:00Z",
            "id": i + 1,
        }
        for i in range(10)
    ]


@pytest.fixture
def weekly_events() -> list[dict[str, Any]]:
    """Six single-instant events a week apart starting 2014-01-01 (a Wednesday)."""
    days = ["2014-01-01", "2014-01-08", "2014-01-15", "2014-01-22", "2014-01-29", "2014-02-05"]
    return [{"start": f"{day}T00:00:00Z", "id": i + 1} for i, day in enumerate(days)]


@pytest.fixture
def calendar(yearly_events) -> Calendar:
    """Unbounded calendar holding the yearly events."""
    return Calendar(events=yearly_events)


# =============================================================================
# File Fixtures
# =============================================================================


@pytest.fixture
def events_file(tmp_path: Path, weekly_events) -> Path:
    """JSON file holding the weekly events plus a one-hour meeting in March."""
    path = tmp_path / "events.json"
    payload = weekly_events + [{"start": "2014-03-10T09:00:00Z", "end": "2014-03-10T10:00:00Z", "id": 7}]
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path
