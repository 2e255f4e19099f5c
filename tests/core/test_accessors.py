"""Tests for calendar_spine.core.accessors module."""

from dataclasses import dataclass
from types import SimpleNamespace

import pytest

from calendar_spine.core.accessors import ByField, ByFunction, as_accessor, is_missing, resolve
from calendar_spine.core.errors import InvalidConfigError


@dataclass
class Meeting:
    begins: str
    title: str


class TestResolve:
    def test_field_on_mapping(self):
        assert resolve(ByField("start"), {"start": "2016-06-01"}) == "2016-06-01"

    def test_field_missing_on_mapping(self):
        assert resolve(ByField("end"), {"start": "2016-06-01"}) is None

    def test_field_on_object(self):
        meeting = Meeting(begins="2016-06-01T09:00:00Z", title="standup")
        assert resolve(ByField("begins"), meeting) == "2016-06-01T09:00:00Z"

    def test_field_missing_on_object(self):
        assert resolve(ByField("end"), SimpleNamespace(start=1)) is None

    def test_function(self):
        assert resolve(ByFunction(lambda e: e["when"] * 2), {"when": 21}) == 42


class TestAsAccessor:
    def test_string_becomes_field(self):
        assert as_accessor("start") == ByField("start")

    def test_callable_becomes_function(self):
        fn = lambda e: e  # noqa: E731
        assert as_accessor(fn) == ByFunction(fn)

    def test_accessor_passthrough(self):
        accessor = ByField("begins")
        assert as_accessor(accessor) is accessor

    @pytest.mark.parametrize("source", ["", 42, None])
    def test_invalid_source_raises(self, source):
        with pytest.raises(InvalidConfigError, match="event_start"):
            as_accessor(source, key="event_start")


class TestDescribe:
    def test_field(self):
        assert ByField("start").describe() == "field 'start'"

    def test_function(self):
        def start_of_meeting(event):
            return event

        assert "start_of_meeting" in ByFunction(start_of_meeting).describe()


class TestIsMissing:
    @pytest.mark.parametrize("value", [None, ""])
    def test_missing(self, value):
        assert is_missing(value)

    @pytest.mark.parametrize("value", [0, "2016-06-01", {"year": 2016}])
    def test_present(self, value):
        assert not is_missing(value)
