"""
Event field accessors.

Events are opaque: a dict from a JSON file, a dataclass, an ORM row. A calendar
only needs two values out of each one, its start and its end, and reads them
through an Accessor:

- ``ByField("start")`` reads a mapping key or, failing that, an attribute
- ``ByFunction(fn)`` calls ``fn(event)``

Examples:
    >>> resolve(ByField("start"), {"start": "2016-06-01"})
    '2016-06-01'
    >>> resolve(as_accessor(lambda e: e["when"]), {"when": 3})
    3

Tags:
    accessors, events, configuration, calendar-spine

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Union

from calendar_spine.core.errors import InvalidConfigError


@dataclass(frozen=True, slots=True)
class ByField:
    """Read an event value by key (mappings) or attribute (other objects)."""

    name: str

    def describe(self) -> str:
        return f"field {self.name!r}"


@dataclass(frozen=True, slots=True)
class ByFunction:
    """Read an event value by calling a function with the event."""

    fn: Callable[[Any], Any]

    def describe(self) -> str:
        return f"function {getattr(self.fn, '__qualname__', repr(self.fn))}"


Accessor = Union[ByField, ByFunction]


def as_accessor(source: str | Callable[[Any], Any] | Accessor, *, key: str = "accessor") -> Accessor:
    """Normalize a field name, a callable or an accessor into an Accessor."""
    if isinstance(source, (ByField, ByFunction)):
        return source
    if isinstance(source, str) and source:
        return ByField(source)
    if callable(source):
        return ByFunction(source)
    raise InvalidConfigError(key, source, f"{key} must be a field name or a callable, got {source!r}")


def resolve(accessor: Accessor, event: Any) -> Any:
    """Read the value an accessor points at; ``None`` when it is absent."""
    if isinstance(accessor, ByFunction):
        return accessor.fn(event)
    if isinstance(event, Mapping):
        return event.get(accessor.name)
    return getattr(event, accessor.name, None)


def is_missing(value: Any) -> bool:
    """Absent or blank values do not count as a date."""
    return value is None or value == ""


__all__ = [
    "ByField",
    "ByFunction",
    "Accessor",
    "as_accessor",
    "resolve",
    "is_missing",
]
