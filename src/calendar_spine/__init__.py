"""
calendar-spine - in-memory event calendars with range queries and
calendar decomposition.

    >>> from calendar_spine import Calendar
    >>> cal = Calendar("2016-01-01", "2016-12-31")
    >>> cal.append({"start": "2016-06-01T09:00:00Z", "id": 1})
    >>> [len(month) for month in cal.months()][5]
    1
"""

__version__ = "0.1.0"

from calendar_spine.calendar import Calendar, CalendarOptions  # noqa: E402
from calendar_spine.core import *  # noqa: E402,F401,F403
from calendar_spine.core import __all__ as _core_all  # noqa: E402

__all__ = ["Calendar", "CalendarOptions", "__version__", *_core_all]
