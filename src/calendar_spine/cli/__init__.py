"""calendar-spine command line interface (``calendar-spine``)."""

from calendar_spine.cli.app import app

__all__ = ["app"]
