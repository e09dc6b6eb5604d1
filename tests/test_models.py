"""Tests for models module."""

import pytest
import time
from pathlib import Path

from src.dirwatch.models import EventKind, WatchEvent


class TestEventKind:
    """Tests for EventKind enum."""

    def test_values(self):
        assert EventKind.CREATE.value == "create"
        assert EventKind.MODIFY.value == "modify"
        assert EventKind.DELETE.value == "delete"
        assert EventKind.OVERFLOW.value == "overflow"

    def test_from_string(self):
        assert EventKind("delete") is EventKind.DELETE

    def test_invalid_value(self):
        with pytest.raises(ValueError):
            EventKind("moved")


class TestWatchEvent:
    """Tests for WatchEvent class."""

    def test_create_event(self):
        event = WatchEvent(EventKind.CREATE, Path("a.txt"), Path("/root"))
        assert event.kind is EventKind.CREATE
        assert event.context == Path("a.txt")
        assert event.directory == Path("/root")
        assert event.is_directory is False
        assert event.count == 1

    def test_timestamp_default(self):
        before = time.time()
        event = WatchEvent(EventKind.CREATE, Path("a.txt"))
        after = time.time()
        assert before <= event.timestamp <= after

    def test_path(self):
        event = WatchEvent(EventKind.MODIFY, Path("a.txt"), Path("/root/sub"))
        assert event.path == Path("/root/sub/a.txt")

    def test_path_without_directory(self):
        event = WatchEvent(EventKind.MODIFY, Path("a.txt"))
        assert event.path == Path("a.txt")

    def test_overflow_has_no_path(self):
        event = WatchEvent(EventKind.OVERFLOW, directory=Path("/root"))
        assert event.context is None
        assert event.path is None

    def test_path_event_requires_context(self):
        with pytest.raises(ValueError, match="requires a context"):
            WatchEvent(EventKind.DELETE)

    def test_context_must_be_relative(self):
        with pytest.raises(ValueError, match="must be relative"):
            WatchEvent(EventKind.CREATE, Path("/abs/a.txt"))

    def test_immutable(self):
        event = WatchEvent(EventKind.CREATE, Path("a.txt"))
        with pytest.raises(AttributeError):
            event.count = 5

    def test_with_count(self):
        event = WatchEvent(EventKind.OVERFLOW, directory=Path("/root"), timestamp=100.0)
        bumped = event.with_count(4)

        assert bumped.count == 4
        assert bumped.timestamp == 100.0
        assert bumped.directory == Path("/root")
        assert event.count == 1

    def test_to_dict(self):
        event = WatchEvent(
            EventKind.DELETE,
            Path("d"),
            Path("/root"),
            is_directory=True,
            timestamp=12345.0,
        )
        assert event.to_dict() == {
            "kind": "delete",
            "context": "d",
            "directory": "/root",
            "is_directory": True,
            "count": 1,
            "timestamp": 12345.0,
        }

    def test_overflow_to_dict(self):
        event = WatchEvent(EventKind.OVERFLOW, count=3, timestamp=1.0)
        data = event.to_dict()
        assert data["context"] is None
        assert data["directory"] is None
        assert data["count"] == 3
