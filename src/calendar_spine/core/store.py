"""
EventStore: the event collection owned by a calendar.

Events go in cheaply (append, extend, replace) and come out ordered by start
date. Ordering is re-established whenever the store is observed through an
ordered or index-based operation, so an index always refers to the
"by start date" view the caller sees.

Manifesto:
    Calendars are built incrementally and queried often. Sorting on every
    insert wastes work; never sorting makes ``remove_first()`` meaningless.
    The store sorts on observation instead:

    - **Cheap mutation:** ``add``/``extend``/``set_all`` never sort
    - **Ordered observation:** iteration, indexing, ``pop_first``/``pop_last``,
      ``slice``/``splice`` all work against the start-date order
    - **Stable ties:** events with equal starts keep their insertion order
    - **Loud failures:** an event without a start date raises
      MissingStartDateError from whichever operation needed the order

Performance:
    - **add/extend/set_all:** O(1)/O(k)/O(n)
    - **ordered operations:** O(n log n), O(n) on an already ordered store
      (timsort); event counts are assumed small

Tags:
    event-store, ordering, collections, calendar-spine

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from datetime import datetime
from typing import Any


class EventStore:
    """
    Ordered, mutable collection of events.

    Args:
        start_of: Sort key resolving an event to its start instant
        events: Initial events (copied)

    Examples:
        >>> store = EventStore(lambda e: e["start"], [{"start": 2}, {"start": 1}])
        >>> store.pop_first()
        {'start': 1}
        >>> len(store)
        1
    """

    def __init__(self, start_of: Callable[[Any], datetime], events: Iterable[Any] | None = None):
        self._start_of = start_of
        self._events: list[Any] = list(events) if events is not None else []

    # ── Mutation ─────────────────────────────────────────────────────────

    def add(self, event: Any) -> None:
        self._events.append(event)

    def extend(self, events: Iterable[Any]) -> None:
        self._events.extend(events)

    def set_all(self, events: Iterable[Any]) -> None:
        """Replace every event."""
        self._events = list(events)

    def remove(self, event: Any) -> None:
        """Remove the first occurrence of ``event``; ValueError if absent."""
        self._events.remove(event)

    def remove_at(self, index: int) -> Any:
        """Remove and return the event at ``index`` of the ordered view."""
        self.sort()
        return self._events.pop(index)

    def pop_first(self) -> Any:
        """Remove and return the earliest event; IndexError when empty."""
        return self.remove_at(0)

    def pop_last(self) -> Any:
        """Remove and return the latest event; IndexError when empty."""
        return self.remove_at(-1)

    def splice(self, start: int | None = None, stop: int | None = None) -> list[Any]:
        """Remove and return an ordered sub-range."""
        self.sort()
        removed = self._events[start:stop]
        del self._events[start:stop]
        return removed

    def rekey(self, start_of: Callable[[Any], datetime]) -> None:
        """Swap the sort key (after accessor reconfiguration)."""
        self._start_of = start_of

    # ── Ordering ─────────────────────────────────────────────────────────

    def sort(self) -> None:
        """Order the backing list by start instant, in place."""
        self._events.sort(key=self._start_of)

    def snapshot_sorted(self) -> list[Any]:
        """A new list of the events ordered by start instant."""
        return sorted(self._events, key=self._start_of)

    # ── Observation ──────────────────────────────────────────────────────

    def slice(self, start: int | None = None, stop: int | None = None) -> list[Any]:
        """Copy of an ordered sub-range."""
        self.sort()
        return self._events[start:stop]

    def __getitem__(self, index: int | slice) -> Any:
        self.sort()
        return self._events[index]

    def __iter__(self) -> Iterator[Any]:
        return iter(self.snapshot_sorted())

    def __len__(self) -> int:
        return len(self._events)

    def __contains__(self, event: Any) -> bool:
        return event in self._events

    def __repr__(self) -> str:
        return f"EventStore(events={len(self._events)})"


__all__ = ["EventStore"]
